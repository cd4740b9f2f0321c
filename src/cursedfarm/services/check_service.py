"""Stat checks against the d20."""
from __future__ import annotations

import logging

from cursedfarm.domain.dice import (
    CheckPreview,
    CheckResult,
    PassiveCheckResult,
    build_preview,
    modifier_for,
    roll_die,
)
from cursedfarm.domain.state import GameState
from cursedfarm.services.character_service import CharacterService

logger = logging.getLogger(__name__)


class CheckService:
    """Resolves active and passive stat checks using the state's RNG."""

    def __init__(self, character_service: CharacterService) -> None:
        self._character_service = character_service

    def perform_stat_check(self, state: GameState, stat_name: str, difficulty: int) -> CheckResult:
        stat_value = self._character_service.get_effective_stat(state, stat_name)
        modifier = modifier_for(stat_value)
        die_roll = roll_die(state.rng)
        total = die_roll + modifier
        result = CheckResult(
            stat_name=stat_name,
            stat_value=stat_value,
            die_roll=die_roll,
            modifier=modifier,
            total=total,
            difficulty=difficulty,
            success=total >= difficulty,
        )
        logger.debug(
            "Stat check: %s (%d) rolled %d + %d = %d vs DC %d -> %s",
            stat_name,
            stat_value,
            die_roll,
            modifier,
            total,
            difficulty,
            "success" if result.success else "failure",
        )
        return result

    def perform_passive_keen_eye_check(self, state: GameState, threshold: int) -> PassiveCheckResult:
        """Succeed outright when keen eye meets the threshold, else roll with advantage."""
        keen_eye = self._character_service.get_effective_stat(state, "keen_eye")
        if keen_eye >= threshold:
            return PassiveCheckResult(success=True, automatic=True, keen_eye_value=keen_eye, threshold=threshold)

        modifier = modifier_for(keen_eye)
        roll1 = roll_die(state.rng)
        roll2 = roll_die(state.rng)
        best_roll = max(roll1, roll2)
        total = best_roll + modifier
        logger.debug(
            "Passive keen eye check: rolled %d and %d, using %d + %d = %d vs %d",
            roll1,
            roll2,
            best_roll,
            modifier,
            total,
            threshold,
        )
        return PassiveCheckResult(
            success=total >= threshold,
            automatic=False,
            keen_eye_value=keen_eye,
            threshold=threshold,
            roll1=roll1,
            roll2=roll2,
            best_roll=best_roll,
            modifier=modifier,
            total=total,
        )

    def preview_check(self, state: GameState, stat_name: str, difficulty: int) -> CheckPreview:
        stat_value = self._character_service.get_effective_stat(state, stat_name)
        return build_preview(stat_name, stat_value, difficulty)
