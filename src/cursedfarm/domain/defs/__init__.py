"""Domain definition exports."""

from .curse_def import CurseDef
from .item_def import ItemDef, ItemType, StatModifierDef
from .room_def import (
    AutoEffectDef,
    CheckDef,
    EventDef,
    EventTrigger,
    FailureEffectDef,
    HiddenAreaDef,
    RequirementsDef,
    RoomDef,
    SearchDef,
    SuccessEffectDef,
)

__all__ = [
    "AutoEffectDef",
    "CheckDef",
    "CurseDef",
    "EventDef",
    "EventTrigger",
    "FailureEffectDef",
    "HiddenAreaDef",
    "ItemDef",
    "ItemType",
    "RequirementsDef",
    "RoomDef",
    "SearchDef",
    "StatModifierDef",
    "SuccessEffectDef",
]
