from __future__ import annotations

from cursedfarm.core.rng import RNG
from cursedfarm.domain.state import GameState
from cursedfarm.services import GameServices, build_services

from tests.helpers.scripted_rng import ScriptedRNG

_services: GameServices | None = None


def get_services() -> GameServices:
    """Services over the shipped definitions, built once per test session."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def make_state(
    rng: RNG | None = None,
    *,
    stats: dict[str, int] | None = None,
    difficulty: str = "default",
    room_id: str = "farm_gate",
) -> GameState:
    state = GameState(seed=0, rng=rng or ScriptedRNG())
    state.stats = dict(stats or {"grit": 3, "keen_eye": 2, "charm": 4})
    state.difficulty = difficulty  # type: ignore[assignment]
    state.current_room_id = room_id
    return state
