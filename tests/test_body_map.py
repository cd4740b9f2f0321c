from cursedfarm.domain.body_map import (
    claim_clear_zone,
    empty_body_map,
    get_curse_stage,
    get_free_parts,
    get_occupied_count,
    is_body_map_full,
    release_curse,
)

from tests.helpers.scripted_rng import ScriptedRNG


def test_empty_body_map_has_four_free_parts() -> None:
    body_map = empty_body_map()

    assert body_map == {"head": None, "arms": None, "body": None, "legs": None}
    assert get_occupied_count(body_map) == 0
    assert not is_body_map_full(body_map)


def test_claim_takes_only_free_parts() -> None:
    body_map = empty_body_map()
    body_map["head"] = "ghost"
    rng = ScriptedRNG(choices=["legs"])

    claimed = claim_clear_zone(body_map, "cow", rng)

    assert claimed == "legs"
    assert body_map["head"] == "ghost"
    assert get_curse_stage(body_map, "cow") == 1
    assert get_free_parts(body_map) == ["arms", "body"]


def test_claim_is_noop_when_full() -> None:
    body_map = {"head": "cow", "arms": "cow", "body": "bee", "legs": "bee"}

    assert claim_clear_zone(body_map, "ghost", ScriptedRNG()) is None
    assert body_map == {"head": "cow", "arms": "cow", "body": "bee", "legs": "bee"}
    assert is_body_map_full(body_map)


def test_release_clears_only_that_curse() -> None:
    body_map = {"head": "cow", "arms": "bee", "body": "cow", "legs": None}

    freed = release_curse(body_map, "cow")

    assert freed == ["head", "body"]
    assert body_map == {"head": None, "arms": "bee", "body": None, "legs": None}
    assert get_curse_stage(body_map, "cow") == 0
