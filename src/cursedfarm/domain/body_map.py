"""Body map ownership helpers.

The body map assigns each of the four body parts to at most one curse. These
helpers are pure over the mapping so the migration path can reuse them on raw
save payloads.
"""
from __future__ import annotations

from typing import Dict, List, MutableMapping

from cursedfarm.core.rng import RNG
from cursedfarm.core.types import BODY_PARTS, BodyPart

BodyMap = Dict[str, str | None]


def empty_body_map() -> BodyMap:
    return {part: None for part in BODY_PARTS}


def get_curse_stage(body_map: MutableMapping[str, str | None], curse_id: str) -> int:
    """Return how many body parts the curse currently holds (0-4)."""
    return sum(1 for part in BODY_PARTS if body_map.get(part) == curse_id)


def get_occupied_count(body_map: MutableMapping[str, str | None]) -> int:
    return sum(1 for part in BODY_PARTS if body_map.get(part) is not None)


def get_free_parts(body_map: MutableMapping[str, str | None]) -> List[BodyPart]:
    return [part for part in BODY_PARTS if body_map.get(part) is None]


def is_body_map_full(body_map: MutableMapping[str, str | None]) -> bool:
    return get_occupied_count(body_map) >= len(BODY_PARTS)


def claim_clear_zone(
    body_map: MutableMapping[str, str | None], curse_id: str, rng: RNG
) -> BodyPart | None:
    """Assign one random unclaimed body part to the curse.

    Parts held by another curse are never taken. Returns None when every part
    is already claimed.
    """
    free_parts = get_free_parts(body_map)
    if not free_parts:
        return None
    chosen = rng.choice(free_parts)
    body_map[chosen] = curse_id
    return chosen


def release_curse(body_map: MutableMapping[str, str | None], curse_id: str) -> List[BodyPart]:
    """Clear every part held by the curse and return the freed parts."""
    freed: List[BodyPart] = []
    for part in BODY_PARTS:
        if body_map.get(part) == curse_id:
            body_map[part] = None
            freed.append(part)
    return freed
