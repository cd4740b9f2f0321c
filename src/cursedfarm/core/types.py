"""Shared type aliases for the core and domain layers."""
from typing import Literal

GameStatus = Literal["playing", "won", "game_over"]
Difficulty = Literal["story", "default", "hard"]
StatName = Literal["grit", "keen_eye", "charm"]
BodyPart = Literal["head", "arms", "body", "legs"]

GAME_STATUSES: tuple[GameStatus, ...] = ("playing", "won", "game_over")
DIFFICULTIES: tuple[Difficulty, ...] = ("story", "default", "hard")
STAT_NAMES: tuple[StatName, ...] = ("grit", "keen_eye", "charm")
BODY_PARTS: tuple[BodyPart, ...] = ("head", "arms", "body", "legs")

__all__ = [
    "BODY_PARTS",
    "BodyPart",
    "DIFFICULTIES",
    "Difficulty",
    "GAME_STATUSES",
    "GameStatus",
    "STAT_NAMES",
    "StatName",
]
