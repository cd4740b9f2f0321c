"""Encounter resolution and room action handlers."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Literal, Tuple

from cursedfarm.domain.defs import EventDef, SearchDef
from cursedfarm.domain.dice import CheckPreview, CheckResult
from cursedfarm.domain.state import GameState
from cursedfarm.services.check_service import CheckService
from cursedfarm.services.curse_service import CurseApplyResult, CurseProgression, CurseService
from cursedfarm.services.inventory_service import InventoryService, ItemPickupResult

logger = logging.getLogger(__name__)

ActionKind = Literal["win", "encounter", "auto"]


@dataclass(slots=True)
class EncounterResult:
    """Outcome of a single stat-check encounter."""

    event_id: str
    check: CheckResult
    story_key: str
    flag_set: str | None = None
    reward_items: Tuple[str, ...] = ()
    curse_result: CurseApplyResult | None = None
    penalty_progressions: List[CurseProgression] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.check.success


@dataclass(slots=True)
class EncounterOutcome:
    """An encounter after its event bookkeeping and reward handling."""

    result: EncounterResult
    event_completed: bool = False
    granted_items: List[ItemPickupResult] = field(default_factory=list)
    pending_items: Tuple[str, ...] = ()
    game_over: bool = False


@dataclass(slots=True)
class SearchResult:
    search_id: str
    story_key: str
    auto_taken: List[ItemPickupResult] = field(default_factory=list)
    available_items: List[str] = field(default_factory=list)
    game_over: bool = False


class EncounterService:
    """Runs checks, auto actions, win rituals and item searches."""

    def __init__(
        self,
        *,
        check_service: CheckService,
        curse_service: CurseService,
        inventory_service: InventoryService,
    ) -> None:
        self._check_service = check_service
        self._curse_service = curse_service
        self._inventory_service = inventory_service

    @staticmethod
    def action_kind(event: EventDef) -> ActionKind | None:
        if event.win_condition:
            return "win"
        if event.check is not None:
            return "encounter"
        if event.effect is not None:
            return "auto"
        return None

    @staticmethod
    def can_escape(event: EventDef) -> bool:
        return not event.no_escape

    # --------------------------------------------------------------- Encounters
    def preview_encounter(self, state: GameState, event: EventDef) -> CheckPreview:
        if event.check is None:
            raise ValueError(f"Event '{event.id}' has no stat check.")
        return self._check_service.preview_check(state, event.check.stat, event.check.difficulty)

    def resolve_encounter(self, state: GameState, event: EventDef) -> EncounterResult:
        """Roll the check and apply flag and curse side effects."""
        if event.check is None:
            raise ValueError(f"Event '{event.id}' has no stat check.")
        check_def = event.check
        check = self._check_service.perform_stat_check(state, check_def.stat, check_def.difficulty)

        if check.success:
            result = EncounterResult(event_id=event.id, check=check, story_key=check_def.success_story)
            if check_def.success_effect.flag:
                state.set_flag(check_def.success_effect.flag)
                result.flag_set = check_def.success_effect.flag
            result.reward_items = check_def.success_effect.items
            return result

        result = EncounterResult(event_id=event.id, check=check, story_key=check_def.failure_story)
        if check_def.failure_effect.curse:
            result.curse_result = self._curse_service.apply_curse(state, check_def.failure_effect.curse)
            if not result.curse_result.blocked:
                # Losing an unprotected fight costs an extra clock tick.
                result.penalty_progressions = self._curse_service.progress_curses(state)
        return result

    def run_encounter(self, state: GameState, event: EventDef) -> EncounterOutcome:
        result = self.resolve_encounter(state, event)
        outcome = EncounterOutcome(result=result)

        if result.success or event.completes_on_failure:
            state.complete_event(event.id)
            outcome.event_completed = True

        if result.success and result.reward_items:
            if state.difficulty == "hard":
                outcome.granted_items = [
                    self._inventory_service.add_item(state, item_id) for item_id in result.reward_items
                ]
            else:
                self._inventory_service.add_pending_items(state, state.current_room_id, result.reward_items)
                outcome.pending_items = result.reward_items

        outcome.game_over = state.game_status == "game_over"
        return outcome

    # ------------------------------------------------------------ Other actions
    def perform_auto_action(self, state: GameState, event: EventDef) -> str | None:
        """Apply an action's no-roll effect and return its story key."""
        effect = event.effect
        if effect is not None:
            if effect.flag:
                state.set_flag(effect.flag)
            if effect.consume_item:
                self._inventory_service.remove_item(state, effect.consume_item)
            if effect.completes_event:
                state.complete_event(effect.completes_event)
        state.complete_event(event.id)
        return event.story_key

    def perform_win_action(self, state: GameState, event: EventDef) -> str | None:
        state.game_status = "won"
        self._curse_service.cure_all(state)
        logger.debug("Win condition reached via %s", event.id)
        return event.story_key

    # ----------------------------------------------------------------- Searches
    def begin_search(self, state: GameState, search: SearchDef) -> SearchResult:
        """Start a search; on hard difficulty cursed finds are picked up at once."""
        result = SearchResult(search_id=search.id, story_key=search.story_key)
        for item_id in search.items:
            item = self._inventory_service.get_item(item_id)
            if item is None:
                logger.warning("Search %s references unknown item '%s'", search.id, item_id)
                continue
            if state.difficulty == "hard" and item.type == "cursed":
                result.auto_taken.append(self._inventory_service.add_item(state, item_id))
            elif not state.has_item(item_id):
                result.available_items.append(item_id)
        result.game_over = state.game_status == "game_over"
        return result

    def take_search_item(self, state: GameState, search: SearchDef, item_id: str) -> ItemPickupResult:
        if item_id not in search.items:
            return ItemPickupResult(item_id=item_id, added=False)
        return self._inventory_service.add_item(state, item_id)

    @staticmethod
    def finish_search(state: GameState, search: SearchDef) -> None:
        state.complete_event(search.id)
