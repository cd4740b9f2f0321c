"""Wiring for a complete set of game services over one content directory."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from cursedfarm.data.repositories import (
    CursesRepository,
    ItemsRepository,
    RoomsRepository,
    StoryRepository,
)
from cursedfarm.services.area_service import AreaService
from cursedfarm.services.character_service import CharacterService
from cursedfarm.services.check_service import CheckService
from cursedfarm.services.curse_service import CurseService
from cursedfarm.services.encounter_service import EncounterService
from cursedfarm.services.inventory_service import InventoryService
from cursedfarm.services.save_service import SaveService
from cursedfarm.storage.save_slots import SaveSlotStore


@dataclass(slots=True)
class GameServices:
    curses_repo: CursesRepository
    items_repo: ItemsRepository
    rooms_repo: RoomsRepository
    story_repo: StoryRepository
    character: CharacterService
    checks: CheckService
    curses: CurseService
    inventory: InventoryService
    areas: AreaService
    encounters: EncounterService
    saves: SaveService


def build_services(
    base_path: Path | str | None = None,
    *,
    config: Dict[str, Any] | None = None,
    save_dir: Path | str | None = None,
) -> GameServices:
    """Build repositories and services sharing the same definitions."""
    curses_repo = CursesRepository(base_path)
    items_repo = ItemsRepository(base_path, curses_repo=curses_repo)
    rooms_repo = RoomsRepository(base_path, items_repo=items_repo)
    story_repo = StoryRepository(base_path)

    character = CharacterService(items_repo, config=config)
    checks = CheckService(character)
    curses = CurseService(curses_repo)
    inventory = InventoryService(items_repo, curses)
    areas = AreaService(
        rooms_repo=rooms_repo,
        story_repo=story_repo,
        curse_service=curses,
        check_service=checks,
    )
    encounters = EncounterService(
        check_service=checks,
        curse_service=curses,
        inventory_service=inventory,
    )
    saves = SaveService(rooms_repo=rooms_repo, slot_store=SaveSlotStore(save_dir))
    return GameServices(
        curses_repo=curses_repo,
        items_repo=items_repo,
        rooms_repo=rooms_repo,
        story_repo=story_repo,
        character=character,
        checks=checks,
        curses=curses,
        inventory=inventory,
        areas=areas,
        encounters=encounters,
        saves=saves,
    )
