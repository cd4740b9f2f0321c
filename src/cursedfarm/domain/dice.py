"""d20 check math and result structures."""
from __future__ import annotations

from dataclasses import dataclass

from cursedfarm.core.rng import RNG

MODIFIER_BASELINE = 2
DIE_SIDES = 20


@dataclass(frozen=True, slots=True)
class CheckResult:
    stat_name: str
    stat_value: int
    die_roll: int
    modifier: int
    total: int
    difficulty: int
    success: bool


@dataclass(frozen=True, slots=True)
class PassiveCheckResult:
    """Outcome of a passive keen eye check.

    Automatic successes carry no rolls; otherwise both advantage rolls are kept.
    """

    success: bool
    automatic: bool
    keen_eye_value: int
    threshold: int
    roll1: int | None = None
    roll2: int | None = None
    best_roll: int | None = None
    modifier: int | None = None
    total: int | None = None


@dataclass(frozen=True, slots=True)
class CheckPreview:
    stat_name: str
    stat_value: int
    modifier: int
    difficulty: int
    difficulty_name: str
    min_roll_needed: int
    success_chance: int

    @property
    def impossible(self) -> bool:
        return self.min_roll_needed > DIE_SIDES

    @property
    def guaranteed(self) -> bool:
        return self.min_roll_needed <= 1


def roll_die(rng: RNG, sides: int = DIE_SIDES) -> int:
    return rng.randint(1, sides)


def modifier_for(stat_value: int) -> int:
    """A stat of 2 adds nothing; each point above adds one."""
    return stat_value - MODIFIER_BASELINE


def difficulty_name(difficulty: int) -> str:
    if difficulty <= 10:
        return "Easy"
    if difficulty <= 15:
        return "Medium"
    return "Hard"


def success_chance(modifier: int, difficulty: int) -> int:
    """Displayed percentage chance; capped at 95 since a natural 1 reads as a fumble."""
    min_roll_needed = difficulty - modifier
    if min_roll_needed <= 1:
        return 95
    if min_roll_needed > DIE_SIDES:
        return 0
    return round((DIE_SIDES + 1 - min_roll_needed) / DIE_SIDES * 100)


def build_preview(stat_name: str, stat_value: int, difficulty: int) -> CheckPreview:
    modifier = modifier_for(stat_value)
    return CheckPreview(
        stat_name=stat_name,
        stat_value=stat_value,
        modifier=modifier,
        difficulty=difficulty,
        difficulty_name=difficulty_name(difficulty),
        min_roll_needed=difficulty - modifier,
        success_chance=success_chance(modifier, difficulty),
    )
