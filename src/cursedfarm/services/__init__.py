"""Service layer exports."""

from .errors import SaveLoadError
from .character_service import CharacterService
from .check_service import CheckService
from .curse_service import CurseApplyResult, CurseProgression, CurseService
from .inventory_service import ConsumableResult, InventoryService, ItemPickupResult
from .area_service import AreaService, HiddenAreaSearchResult, RoomActions, RoomEntryResult
from .encounter_service import EncounterOutcome, EncounterResult, EncounterService, SearchResult
from .save_service import SaveService
from .engine import GameServices, build_services

__all__ = [
    "SaveLoadError",
    "CharacterService",
    "CheckService",
    "CurseApplyResult",
    "CurseProgression",
    "CurseService",
    "ConsumableResult",
    "InventoryService",
    "ItemPickupResult",
    "AreaService",
    "HiddenAreaSearchResult",
    "RoomActions",
    "RoomEntryResult",
    "EncounterOutcome",
    "EncounterResult",
    "EncounterService",
    "SearchResult",
    "SaveService",
    "GameServices",
    "build_services",
]
