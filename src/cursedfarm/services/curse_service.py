"""Curse application, progression and removal.

All active curses share one countdown (``curse_clock``). Each room transition
ticks it; when it runs out a single randomly chosen active curse claims one
free body part and the clock restarts. Four claimed parts end the game.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Literal

from cursedfarm.core.types import BodyPart
from cursedfarm.data.repositories import CursesRepository
from cursedfarm.domain.body_map import (
    claim_clear_zone,
    empty_body_map,
    get_curse_stage,
    is_body_map_full,
    release_curse,
)
from cursedfarm.domain.state import GameState

logger = logging.getLogger(__name__)

CurseApplyStatus = Literal["success", "blocked", "already_active", "story_mode_blocked", "unknown_curse"]


@dataclass(slots=True)
class CurseApplyResult:
    status: CurseApplyStatus
    curse_id: str
    body_part: BodyPart | None = None

    @property
    def applied(self) -> bool:
        return self.status == "success"

    @property
    def blocked(self) -> bool:
        return self.status == "blocked"


@dataclass(slots=True)
class CurseProgression:
    """A claim made when the shared clock ran out."""

    curse_id: str
    body_part: BodyPart
    stage: int
    game_over: bool = False


class CurseService:
    """Owns the body map claim rules and the shared curse clock."""

    def __init__(self, curses_repo: CursesRepository) -> None:
        self._curses_repo = curses_repo

    def has_protection(self, state: GameState, curse_id: str) -> bool:
        curse_def = self._curses_repo.find(curse_id)
        if curse_def is None:
            return False
        return state.has_item(curse_def.protective_item)

    @staticmethod
    def effective_clock_interval(state: GameState) -> int:
        """Story mode gives one extra room between claims."""
        return state.curse_clock_interval + (1 if state.difficulty == "story" else 0)

    @staticmethod
    def get_curse_stage(state: GameState, curse_id: str) -> int:
        return get_curse_stage(state.body_map, curse_id)

    def apply_curse(self, state: GameState, curse_id: str) -> CurseApplyResult:
        if self.has_protection(state, curse_id):
            logger.debug("Curse %s blocked by protective item", curse_id)
            return CurseApplyResult(status="blocked", curse_id=curse_id)
        if curse_id in state.active_curses:
            logger.debug("Curse %s already active", curse_id)
            return CurseApplyResult(status="already_active", curse_id=curse_id)
        if self._curses_repo.find(curse_id) is None:
            logger.warning("Cannot apply unknown curse '%s'", curse_id)
            return CurseApplyResult(status="unknown_curse", curse_id=curse_id)
        if state.difficulty == "story" and state.active_curses:
            logger.debug("Story mode blocked curse %s; another curse is active", curse_id)
            return CurseApplyResult(status="story_mode_blocked", curse_id=curse_id)

        state.active_curses[curse_id] = True
        body_part = claim_clear_zone(state.body_map, curse_id, state.rng)
        if state.curse_clock <= 0:
            state.curse_clock = self.effective_clock_interval(state)
        logger.debug("Applied curse %s (claimed %s)", curse_id, body_part)
        self.check_game_over(state)
        return CurseApplyResult(status="success", curse_id=curse_id, body_part=body_part)

    def progress_curses(self, state: GameState) -> List[CurseProgression]:
        """Tick the shared clock once and return any claims it caused."""
        results: List[CurseProgression] = []
        if not state.is_playing or not state.active_curses:
            return results

        state.curse_clock -= 1
        if state.curse_clock <= 0:
            curse_id = state.rng.choice(list(state.active_curses))
            body_part = claim_clear_zone(state.body_map, curse_id, state.rng)
            if body_part is not None:
                stage = get_curse_stage(state.body_map, curse_id)
                logger.debug("Curse %s claimed %s (stage %d)", curse_id, body_part, stage)
                results.append(CurseProgression(curse_id=curse_id, body_part=body_part, stage=stage))
            state.curse_clock = self.effective_clock_interval(state)

        if self.check_game_over(state) and results:
            results[-1].game_over = True
        return results

    def remove_curse(self, state: GameState, curse_id: str) -> bool:
        """Fully cure a curse; the clock stops once nothing is active."""
        if curse_id not in state.active_curses:
            return False
        del state.active_curses[curse_id]
        release_curse(state.body_map, curse_id)
        if not state.active_curses:
            state.curse_clock = 0
        logger.debug("Removed curse: %s", curse_id)
        return True

    @staticmethod
    def cure_all(state: GameState) -> None:
        state.active_curses.clear()
        state.body_map = empty_body_map()
        state.curse_clock = 0

    @staticmethod
    def check_game_over(state: GameState) -> bool:
        if is_body_map_full(state.body_map):
            state.game_status = "game_over"
            return True
        return False

    def curse_name(self, curse_id: str) -> str:
        curse_def = self._curses_repo.find(curse_id)
        return curse_def.name if curse_def is not None else curse_id
