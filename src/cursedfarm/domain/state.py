"""Domain-level state tracking."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from cursedfarm.core.rng import RNG
from cursedfarm.core.types import Difficulty, GameStatus
from cursedfarm.domain.body_map import BodyMap, empty_body_map

logger = logging.getLogger(__name__)

DEFAULT_STARTING_ROOM_ID = "farm_gate"
DEFAULT_CURSE_CLOCK_INTERVAL = 4
MIN_STAT_VALUE = 2
STAT_SOFT_CAP = 5


def _default_stats() -> Dict[str, int]:
    return {"grit": MIN_STAT_VALUE, "keen_eye": MIN_STAT_VALUE, "charm": MIN_STAT_VALUE}


@dataclass
class GameState:
    """Mutable player state for a single session."""

    seed: int
    rng: RNG = field(compare=False, repr=False)
    character_name: str = ""
    stats: Dict[str, int] = field(default_factory=_default_stats)
    bonus_point_assigned: bool = False
    inventory: List[str] = field(default_factory=list)
    equipped: List[str] = field(default_factory=list)
    current_room_id: str = DEFAULT_STARTING_ROOM_ID
    visited_rooms: Dict[str, int] = field(default_factory=dict)
    room_transitions: int = 0
    discovered_hidden_areas: List[str] = field(default_factory=list)
    body_map: BodyMap = field(default_factory=empty_body_map)
    active_curses: Dict[str, bool] = field(default_factory=dict)
    curse_clock: int = 0
    curse_clock_interval: int = DEFAULT_CURSE_CLOCK_INTERVAL
    flags: Dict[str, Any] = field(default_factory=dict)
    completed_events: List[str] = field(default_factory=list)
    game_status: GameStatus = "playing"
    search_attempts: Dict[str, int] = field(default_factory=dict)
    difficulty: Difficulty = "default"
    pending_items: Dict[str, List[str]] = field(default_factory=dict)
    item_seed: int = 0
    item_placements: Dict[str, Any] | None = None

    @property
    def is_playing(self) -> bool:
        return self.game_status == "playing"

    def has_item(self, item_id: str) -> bool:
        """True when the item is carried or equipped."""
        return item_id in self.inventory or item_id in self.equipped

    def has_flag(self, flag_name: str) -> bool:
        return bool(self.flags.get(flag_name))

    def set_flag(self, flag_name: str, value: Any = True) -> None:
        self.flags[flag_name] = value
        logger.debug("Flag set: %s = %r", flag_name, value)

    def is_event_completed(self, event_id: str) -> bool:
        return event_id in self.completed_events

    def complete_event(self, event_id: str) -> None:
        if event_id not in self.completed_events:
            self.completed_events.append(event_id)
            logger.debug("Event completed: %s", event_id)

    def is_hidden_area_discovered(self, area_id: str) -> bool:
        return area_id in self.discovered_hidden_areas

    def discover_hidden_area(self, area_id: str) -> bool:
        if area_id in self.discovered_hidden_areas:
            return False
        self.discovered_hidden_areas.append(area_id)
        return True

    def current_room_visit_count(self) -> int:
        return self.visited_rooms.get(self.current_room_id, 0)

    def get_pending_items(self, room_id: str) -> List[str]:
        return list(self.pending_items.get(room_id, []))
