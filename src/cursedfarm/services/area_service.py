"""Room navigation, hidden area discovery and room availability views."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from cursedfarm.data.repositories import RoomsRepository, StoryRepository
from cursedfarm.domain.defs import EventDef, HiddenAreaDef, RoomDef, SearchDef
from cursedfarm.domain.dice import PassiveCheckResult
from cursedfarm.domain.requirements import check_event_requirements, check_search_requirements
from cursedfarm.domain.state import GameState
from cursedfarm.services.check_service import CheckService
from cursedfarm.services.curse_service import CurseProgression, CurseService

logger = logging.getLogger(__name__)

SEARCH_THRESHOLD_FLOOR = 5
SEARCH_THRESHOLD_STEP = 2


@dataclass(slots=True)
class RoomEntryResult:
    """Everything the presentation layer needs after a room transition."""

    room_id: str
    entered: bool
    first_visit: bool = False
    curse_progressions: List[CurseProgression] = field(default_factory=list)
    game_over: bool = False
    discovered_area_id: str | None = None
    discovery_story_key: str | None = None
    arrival_story_key: str | None = None
    blocked_by_event_id: str | None = None
    back_room_id: str | None = None


@dataclass(slots=True)
class HiddenAreaSearchResult:
    room_id: str
    searched: bool
    curse_progressions: List[CurseProgression] = field(default_factory=list)
    game_over: bool = False
    area_id: str | None = None
    check: PassiveCheckResult | None = None
    discovered: bool = False
    story_key: str | None = None


@dataclass(slots=True)
class RoomActions:
    """Choices currently on offer in a room."""

    room_id: str
    action_events: Tuple[EventDef, ...] = ()
    search: SearchDef | None = None
    can_search_hidden_areas: bool = False
    unclaimed_search_items: Tuple[str, ...] = ()
    pending_items: Tuple[str, ...] = ()


class AreaService:
    """Moves the player between rooms and evaluates what each room offers."""

    def __init__(
        self,
        *,
        rooms_repo: RoomsRepository,
        story_repo: StoryRepository,
        curse_service: CurseService,
        check_service: CheckService,
    ) -> None:
        self._rooms_repo = rooms_repo
        self._story_repo = story_repo
        self._curse_service = curse_service
        self._check_service = check_service

    # ------------------------------------------------------------ Transitions
    @staticmethod
    def move_to_room(state: GameState, room_id: str) -> None:
        state.current_room_id = room_id
        state.room_transitions += 1
        state.visited_rooms[room_id] = state.visited_rooms.get(room_id, 0) + 1
        logger.debug("Moved to room: %s (visit #%d)", room_id, state.visited_rooms[room_id])

    def enter_room(self, state: GameState, room_id: str) -> RoomEntryResult:
        if not state.is_playing:
            return RoomEntryResult(room_id=room_id, entered=False, game_over=state.game_status == "game_over")
        room = self._rooms_repo.find(room_id)
        if room is None:
            logger.warning("Cannot enter unknown room '%s'", room_id)
            return RoomEntryResult(room_id=room_id, entered=False)

        result = RoomEntryResult(room_id=room_id, entered=True, first_visit=room_id not in state.visited_rooms)
        self.move_to_room(state, room_id)

        # The very first arrival does not tick the clock.
        if state.room_transitions > 1:
            result.curse_progressions = self._curse_service.progress_curses(state)
            if state.game_status == "game_over":
                result.game_over = True
                return result

        discovery = self._passive_discovery(state, room)
        if discovery is not None:
            result.discovered_area_id = discovery.name
            result.discovery_story_key = f"{discovery.name}_discover"

        self._resolve_arrival_story(state, room, result)
        return result

    def _passive_discovery(self, state: GameState, room: RoomDef) -> HiddenAreaDef | None:
        for area in room.hidden_areas:
            if state.is_hidden_area_discovered(area.name):
                continue
            if not check_event_requirements(state, area.requirements):
                continue
            if self._check_service.perform_passive_keen_eye_check(state, area.luck_threshold).success:
                state.discover_hidden_area(area.name)
                logger.debug("Discovered hidden area: %s", area.name)
                return area
        return None

    def _resolve_arrival_story(self, state: GameState, room: RoomDef, result: RoomEntryResult) -> None:
        entry_event = next(
            (
                event
                for event in room.events
                if event.trigger == "first_visit"
                and not state.is_event_completed(event.id)
                and check_event_requirements(state, event.requirements)
            ),
            None,
        )
        if entry_event is not None:
            result.arrival_story_key = entry_event.story_key
            if entry_event.blocks_entry:
                # Blocking events stay open until their requirements change.
                result.blocked_by_event_id = entry_event.id
                result.back_room_id = room.connections[0] if room.connections else None
            elif entry_event.one_time:
                state.complete_event(entry_event.id)
            return

        actions_done = all(
            state.is_event_completed(event.id) for event in room.events if event.trigger == "action"
        )
        cleared_key = f"{room.id}_return_cleared"
        if actions_done and self._story_repo.has_story_text(cleared_key):
            result.arrival_story_key = cleared_key
        else:
            result.arrival_story_key = f"{room.id}_return"

    # ---------------------------------------------------------- Hidden areas
    def search_hidden_areas(self, state: GameState, room_id: str) -> HiddenAreaSearchResult:
        """Actively search for a hidden area; each attempt costs one curse tick."""
        room = self._rooms_repo.find(room_id)
        if room is None or not state.is_playing:
            return HiddenAreaSearchResult(room_id=room_id, searched=False)
        candidates = self._undiscovered_areas(state, room)
        if not candidates:
            return HiddenAreaSearchResult(room_id=room_id, searched=False)
        target = candidates[0]

        result = HiddenAreaSearchResult(room_id=room_id, searched=True, area_id=target.name)
        result.curse_progressions = self._curse_service.progress_curses(state)
        if state.game_status == "game_over":
            result.game_over = True
            return result

        attempts = state.search_attempts.get(room_id, 0)
        threshold = max(SEARCH_THRESHOLD_FLOOR, target.luck_threshold - attempts * SEARCH_THRESHOLD_STEP)
        result.check = self._check_service.perform_passive_keen_eye_check(state, threshold)
        if result.check.success:
            state.discover_hidden_area(target.name)
            result.discovered = True
            result.story_key = f"{target.name}_discover"
        else:
            state.search_attempts[room_id] = attempts + 1
            fail_key = f"{room_id}_search_fail"
            result.story_key = fail_key if self._story_repo.has_story_text(fail_key) else None
        return result

    @staticmethod
    def _undiscovered_areas(state: GameState, room: RoomDef) -> List[HiddenAreaDef]:
        return [
            area
            for area in room.hidden_areas
            if not state.is_hidden_area_discovered(area.name)
            and check_event_requirements(state, area.requirements)
        ]

    # -------------------------------------------------------------- Availability
    def list_room_actions(self, state: GameState, room_id: str) -> RoomActions:
        room = self._rooms_repo.find(room_id)
        if room is None:
            return RoomActions(room_id=room_id)
        action_events = tuple(
            event
            for event in room.events
            if event.trigger == "action"
            and not state.is_event_completed(event.id)
            and check_event_requirements(state, event.requirements)
        )
        search = next(
            (
                candidate
                for candidate in room.searches
                if not state.is_event_completed(candidate.id)
                and check_search_requirements(state, candidate.requirements)
            ),
            None,
        )
        unclaimed: List[str] = []
        for completed in room.searches:
            if not state.is_event_completed(completed.id):
                continue
            unclaimed.extend(item_id for item_id in completed.items if not state.has_item(item_id))
        return RoomActions(
            room_id=room_id,
            action_events=action_events,
            search=search,
            can_search_hidden_areas=search is None and bool(self._undiscovered_areas(state, room)),
            unclaimed_search_items=tuple(unclaimed),
            pending_items=tuple(state.get_pending_items(room_id)),
        )

    def is_room_content_done(self, state: GameState, room_id: str) -> bool:
        room = self._rooms_repo.find(room_id)
        if room is None:
            return True
        for event in room.events:
            if (
                event.trigger == "action"
                and not state.is_event_completed(event.id)
                and check_event_requirements(state, event.requirements)
            ):
                return False
        if any(not state.is_event_completed(search.id) for search in room.searches):
            return False
        for search in room.searches:
            if any(not state.has_item(item_id) for item_id in search.items):
                return False
        return all(state.is_hidden_area_discovered(area.name) for area in room.hidden_areas)

    def is_room_fully_cleared(self, state: GameState, room_id: str) -> bool:
        """True for rooms that had something to do and have nothing left."""
        room = self._rooms_repo.find(room_id)
        if room is None:
            return False
        has_content = (
            any(event.trigger == "action" for event in room.events)
            or bool(room.searches)
            or bool(room.hidden_areas)
        )
        return has_content and self.is_room_content_done(state, room_id)

    def get_visible_neighbors(self, state: GameState, room_id: str) -> List[str]:
        room = self._rooms_repo.find(room_id)
        if room is None:
            return []
        known = self._rooms_repo.ids()
        visible = [conn_id for conn_id in room.connections if conn_id in known]
        visible.extend(
            area.name
            for area in room.hidden_areas
            if state.is_hidden_area_discovered(area.name) and area.name in known
        )
        if not visible:
            return list(room.connections)
        return visible
