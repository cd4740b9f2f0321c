import json
import logging
from pathlib import Path

import pytest

from cursedfarm.data.errors import DataLoadError, DataReferenceError, DataValidationError
from cursedfarm.data.repositories import (
    CursesRepository,
    ItemsRepository,
    RoomsRepository,
    StoryRepository,
)
from cursedfarm.data.repositories.story_repo import parse_story_text
from cursedfarm.domain.state import GameState

from tests.helpers.scripted_rng import ScriptedRNG


def test_curses_repo_loads_definitions(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "curses.json", _CURSES)

    repo = CursesRepository(base_path=definitions_dir)
    cow = repo.get("cow")

    assert cow.name == "Cow Curse"
    assert cow.protective_item == "brass_collar"
    assert cow.body_part_descriptions["head"].startswith("Horns")


def test_repo_get_missing_raises_and_find_returns_none(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "curses.json", _CURSES)
    repo = CursesRepository(base_path=definitions_dir)

    with pytest.raises(KeyError):
        repo.get("werewolf")
    assert repo.find("werewolf") is None


def test_curses_repo_rejects_unknown_body_part(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "curses.json",
        {"cow": {"name": "Cow", "protective_item": "brass_collar", "body_part_descriptions": {"tail": "x"}}},
    )

    with pytest.raises(DataValidationError):
        CursesRepository(base_path=definitions_dir).all()


def test_items_repo_parses_modifiers_and_flags(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "curses.json", _CURSES)
    _write_json(definitions_dir / "items.json", _ITEMS)
    curses_repo = CursesRepository(base_path=definitions_dir)

    repo = ItemsRepository(base_path=definitions_dir, curses_repo=curses_repo)
    gloves = repo.get("work_gloves")
    bell = repo.get("cracked_cowbell")

    assert gloves.can_equip and gloves.equip_slot == "hands"
    assert gloves.stat_boost is not None and gloves.stat_boost.amount == 2
    assert bell.curse_effect == "cow"
    assert bell.stat_penalty is not None and bell.stat_penalty.stat == "charm"
    assert repo.get("brass_collar").protects_from == "cow"


def test_items_repo_rejects_unknown_curse_reference(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "curses.json", _CURSES)
    _write_json(
        definitions_dir / "items.json",
        {"garlic": {"name": "Garlic", "type": "protective", "protects_from": "vampire"}},
    )
    curses_repo = CursesRepository(base_path=definitions_dir)

    with pytest.raises(DataReferenceError):
        ItemsRepository(base_path=definitions_dir, curses_repo=curses_repo).all()


def test_items_repo_rejects_unknown_type(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "items.json", {"rock": {"name": "Rock", "type": "weapon"}})

    with pytest.raises(DataValidationError):
        ItemsRepository(base_path=definitions_dir).all()


def test_items_repo_rejects_slot_on_unequippable_item(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "items.json",
        {"hat": {"name": "Hat", "type": "equipment", "equip_slot": "head"}},
    )

    with pytest.raises(DataValidationError):
        ItemsRepository(base_path=definitions_dir).all()


def test_rooms_repo_rejects_unknown_connection(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "rooms.json", {"barn": {"name": "Barn", "connections": ["moon"]}})

    with pytest.raises(DataReferenceError):
        RoomsRepository(base_path=definitions_dir).all()


def test_rooms_repo_rejects_unknown_hidden_area(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "rooms.json",
        {"barn": {"name": "Barn", "hidden_areas": [{"name": "attic", "luck_threshold": 4}]}},
    )

    with pytest.raises(DataReferenceError):
        RoomsRepository(base_path=definitions_dir).all()


def test_rooms_repo_rejects_unknown_trigger_and_stat(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "rooms.json",
        {"barn": {"name": "Barn", "events": [{"id": "e", "trigger": "on_exit"}]}},
    )
    with pytest.raises(DataValidationError):
        RoomsRepository(base_path=definitions_dir).all()

    _write_json(
        definitions_dir / "rooms.json",
        {
            "barn": {
                "name": "Barn",
                "events": [
                    {
                        "id": "e",
                        "trigger": "action",
                        "check": {"stat": "luck", "difficulty": 10, "success_story": "a", "failure_story": "b"},
                    }
                ],
            }
        },
    )
    with pytest.raises(DataValidationError):
        RoomsRepository(base_path=definitions_dir).all()


def test_rooms_repo_rejects_unknown_reward_item(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(definitions_dir / "items.json", _ITEMS)
    _write_json(
        definitions_dir / "rooms.json",
        {"barn": {"name": "Barn", "searches": [{"id": "s", "story_key": "s", "items": ["golden_fleece"]}]}},
    )
    items_repo = ItemsRepository(base_path=definitions_dir)

    with pytest.raises(DataReferenceError):
        RoomsRepository(base_path=definitions_dir, items_repo=items_repo).all()


def test_rooms_repo_parses_event_fields(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    _write_json(
        definitions_dir / "rooms.json",
        {
            "barn": {
                "name": "Barn",
                "events": [
                    {
                        "id": "fight",
                        "trigger": "action",
                        "no_escape": True,
                        "requirements": {"has_items": ["a", "b"], "visit_count": 2},
                        "check": {
                            "stat": "grit",
                            "difficulty": 12,
                            "success_story": "win",
                            "failure_story": "lose",
                            "success_effect": {"flag": "won_fight"},
                            "failure_effect": {"curse": "cow"},
                        },
                    }
                ],
            }
        },
    )

    event = RoomsRepository(base_path=definitions_dir).get("barn").events[0]

    assert event.no_escape is True
    assert event.requirements is not None
    assert event.requirements.has_items == ("a", "b")
    assert event.requirements.visit_count == 2
    assert event.check is not None
    assert event.check.success_effect.flag == "won_fight"
    assert event.check.success_effect.items == ()
    assert event.check.failure_effect.curse == "cow"


def test_missing_definition_file_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)

    with pytest.raises(DataLoadError):
        CursesRepository(base_path=definitions_dir).all()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "curses.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(DataLoadError):
        CursesRepository(base_path=definitions_dir).all()


def test_parse_story_text_strips_keys_and_bodies() -> None:
    blocks = parse_story_text("[ intro ]\n  Hello there.  \n[END]\n\nnoise\n[outro]\nBye.\n[END]")

    assert blocks == {"intro": "Hello there.", "outro": "Bye."}


def test_story_repo_fallback_and_render(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "story.txt").write_text(
        "[game_intro]\nWelcome, {playerName}. The {curse} waits.\n[END]\n"
        "[game_over]\nThe end.\n[END]\n[game_win]\nYou won.\n[END]\n",
        encoding="utf-8",
    )
    repo = StoryRepository(base_path=definitions_dir)
    state = GameState(seed=0, rng=ScriptedRNG())
    state.character_name = "Ada Lovelace"

    assert repo.has_story_text("game_intro")
    assert repo.render("game_intro", state, {"curse": "cow"}) == "Welcome, Ada. The cow waits."
    with caplog.at_level(logging.WARNING, logger="cursedfarm"):
        assert repo.get_story_text("nope") == '[Story block "nope" not found. This might be a bug.]'
    assert "nope" in caplog.text


def test_story_repo_render_defaults_player_name(tmp_path: Path) -> None:
    definitions_dir = _make_definitions_dir(tmp_path)
    (definitions_dir / "story.txt").write_text("[hello]\nHi {playerName}!\n[END]\n", encoding="utf-8")
    repo = StoryRepository(base_path=definitions_dir)

    assert repo.render("hello", GameState(seed=0, rng=ScriptedRNG())) == "Hi Adventurer!"


def test_shipped_definitions_load_with_cross_references() -> None:
    curses_repo = CursesRepository()
    items_repo = ItemsRepository(curses_repo=curses_repo)
    rooms_repo = RoomsRepository(items_repo=items_repo)

    assert len(curses_repo.all()) == 7
    assert "potion_of_cleansing" in items_repo.ids()
    assert "farm_gate" in rooms_repo.ids()
    for curse in curses_repo.all():
        assert items_repo.get(curse.protective_item).protects_from == curse.id


def test_shipped_story_covers_room_keys() -> None:
    story_repo = StoryRepository()
    rooms_repo = RoomsRepository()

    for key in ("game_intro", "game_over", "game_win"):
        assert story_repo.has_story_text(key)
    for room in rooms_repo.all():
        assert story_repo.has_story_text(f"{room.id}_return"), room.id
        for event in room.events:
            if event.story_key:
                assert story_repo.has_story_text(event.story_key), event.id
            if event.check is not None:
                assert story_repo.has_story_text(event.check.success_story), event.id
                assert story_repo.has_story_text(event.check.failure_story), event.id
        for search in room.searches:
            assert story_repo.has_story_text(search.story_key), search.id
        for area in room.hidden_areas:
            assert story_repo.has_story_text(f"{area.name}_discover"), area.name


_CURSES = {
    "cow": {
        "name": "Cow Curse",
        "protective_item": "brass_collar",
        "body_part_descriptions": {"head": "Horns sprout.", "legs": "Hooves."},
    },
    "ghost": {"name": "Ghost Curse", "protective_item": "salt_amulet"},
}

_ITEMS = {
    "brass_collar": {"name": "Brass Collar", "type": "protective", "protects_from": "cow"},
    "cracked_cowbell": {
        "name": "Cracked Cowbell",
        "type": "cursed",
        "curse_effect": "cow",
        "stat_penalty": {"stat": "charm", "amount": 1},
    },
    "work_gloves": {
        "name": "Work Gloves",
        "type": "equipment",
        "stat_boost": {"stat": "grit", "amount": 2},
        "can_equip": True,
        "equip_slot": "hands",
    },
}


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _make_definitions_dir(tmp_path: Path) -> Path:
    definitions_dir = tmp_path / "definitions"
    definitions_dir.mkdir()
    return definitions_dir
