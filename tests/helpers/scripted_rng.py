from __future__ import annotations

from typing import Iterable, List, Sequence, TypeVar

from cursedfarm.core.rng import RNG

T = TypeVar("T")


class ScriptedRNG(RNG):
    """RNG that returns queued rolls and choices before falling back to the seed."""

    def __init__(self, rolls: Iterable[int] = (), choices: Iterable[object] = (), seed: int = 0) -> None:
        super().__init__(seed)
        self.rolls: List[int] = list(rolls)
        self.choices: List[object] = list(choices)
        self.randint_calls = 0

    def randint(self, a: int, b: int) -> int:
        self.randint_calls += 1
        if self.rolls:
            value = self.rolls.pop(0)
            assert a <= value <= b, f"scripted roll {value} outside {a}..{b}"
            return value
        return super().randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        if self.choices:
            value = self.choices.pop(0)
            assert value in seq, f"scripted choice {value!r} not in {list(seq)!r}"
            return value  # type: ignore[return-value]
        return super().choice(seq)
