"""Character creation and stat services."""
from __future__ import annotations

import logging
import secrets
from typing import Any, Dict

from cursedfarm.core.rng import RNG
from cursedfarm.core.types import DIFFICULTIES, STAT_NAMES, Difficulty
from cursedfarm.data.repositories import ItemsRepository
from cursedfarm.domain.state import MIN_STAT_VALUE, STAT_SOFT_CAP, GameState
from cursedfarm.storage.config import default_config

logger = logging.getLogger(__name__)

MAX_STARTING_STAT = 4
MIN_EFFECTIVE_STAT = 1


class CharacterService:
    """Creates new sessions and computes effective stats."""

    def __init__(self, items_repo: ItemsRepository, *, config: Dict[str, Any] | None = None) -> None:
        self._items_repo = items_repo
        self._config = config or default_config()

    def start_new_game(
        self,
        seed: int | None = None,
        *,
        character_name: str = "",
        difficulty: Difficulty | None = None,
    ) -> GameState:
        """Create a fresh state with random starting stats."""
        if seed is None:
            seed = secrets.randbits(32)
        rng = RNG(seed)
        state = GameState(seed=seed, rng=rng)
        state.character_name = character_name
        state.stats = {stat: rng.randint(MIN_STAT_VALUE, MAX_STARTING_STAT) for stat in STAT_NAMES}
        self.set_difficulty(state, difficulty or self._config["difficulty"])
        logger.debug("New game initialized with stats: %s", state.stats)
        return state

    def set_difficulty(self, state: GameState, difficulty: str) -> bool:
        if difficulty not in DIFFICULTIES:
            return False
        state.difficulty = difficulty  # type: ignore[assignment]
        state.curse_clock_interval = self._clock_interval_for(difficulty)
        return True

    def _clock_interval_for(self, difficulty: str) -> int:
        base = int(self._config["curse_clock_interval"])
        if difficulty == "hard":
            return max(1, base - 1)
        return base

    def apply_bonus_point(self, state: GameState, stat_name: str) -> bool:
        """Raise one base stat by a point, once per session, up to the soft cap."""
        if state.bonus_point_assigned or stat_name not in state.stats:
            return False
        if state.stats[stat_name] >= STAT_SOFT_CAP:
            return False
        state.stats[stat_name] += 1
        state.bonus_point_assigned = True
        logger.debug("Bonus point applied to %s. New value: %d", stat_name, state.stats[stat_name])
        return True

    def get_effective_stat(self, state: GameState, stat_name: str) -> int:
        """Base stat plus equipment boosts minus penalties from carried cursed items."""
        value = state.stats.get(stat_name, MIN_STAT_VALUE)
        for item_id in state.equipped:
            item = self._items_repo.find(item_id)
            if item and item.stat_boost and item.stat_boost.stat == stat_name:
                value += item.stat_boost.amount
        for item_id in state.inventory:
            item = self._items_repo.find(item_id)
            if item and item.type == "cursed" and item.stat_penalty and item.stat_penalty.stat == stat_name:
                value -= item.stat_penalty.amount
        return max(MIN_EFFECTIVE_STAT, value)
