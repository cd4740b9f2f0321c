from cursedfarm.core.types import STAT_NAMES
from cursedfarm.services.character_service import CharacterService

from tests.helpers.game_factory import get_services, make_state


def _make_character_service(config: dict | None = None) -> CharacterService:
    return CharacterService(get_services().items_repo, config=config)


def test_start_new_game_rolls_stats_in_range() -> None:
    service = _make_character_service()

    state = service.start_new_game(seed=123, character_name="Ada")

    assert state.seed == 123
    assert state.character_name == "Ada"
    assert set(state.stats) == set(STAT_NAMES)
    assert all(2 <= value <= 4 for value in state.stats.values())
    assert state.current_room_id == "farm_gate"
    assert state.visited_rooms == {}
    assert state.game_status == "playing"
    assert state.difficulty == "default"
    assert state.curse_clock_interval == 4


def test_start_new_game_is_deterministic_per_seed() -> None:
    service = _make_character_service()

    assert service.start_new_game(seed=7).stats == service.start_new_game(seed=7).stats


def test_difficulty_sets_clock_interval() -> None:
    service = _make_character_service({"difficulty": "hard", "curse_clock_interval": 4})

    state = service.start_new_game(seed=1)
    assert state.difficulty == "hard"
    assert state.curse_clock_interval == 3

    assert service.set_difficulty(state, "story")
    assert state.curse_clock_interval == 4
    assert not service.set_difficulty(state, "nightmare")
    assert state.difficulty == "story"


def test_bonus_point_applies_once() -> None:
    service = _make_character_service()
    state = make_state(stats={"grit": 3, "keen_eye": 2, "charm": 4})

    assert service.apply_bonus_point(state, "keen_eye")
    assert state.stats["keen_eye"] == 3
    assert not service.apply_bonus_point(state, "grit")
    assert state.stats["grit"] == 3


def test_bonus_point_refused_at_soft_cap() -> None:
    service = _make_character_service()
    state = make_state(stats={"grit": 5, "keen_eye": 2, "charm": 2})

    assert not service.apply_bonus_point(state, "grit")
    assert not state.bonus_point_assigned


def test_bonus_then_equipment_scenario() -> None:
    services = get_services()
    state = make_state(stats={"grit": 3, "keen_eye": 2, "charm": 4})
    state.inventory.append("work_gloves")

    assert services.character.apply_bonus_point(state, "keen_eye")
    assert services.inventory.equip_item(state, "work_gloves")

    assert state.stats["keen_eye"] == 3
    assert services.character.get_effective_stat(state, "grit") == 5


def test_effective_stat_subtracts_cursed_item_penalty_with_floor() -> None:
    service = _make_character_service()
    state = make_state(stats={"grit": 3, "keen_eye": 2, "charm": 2})
    state.inventory = ["ghostly_locket", "cracked_cowbell"]

    assert service.get_effective_stat(state, "keen_eye") == 1
    assert service.get_effective_stat(state, "charm") == 1
    assert service.get_effective_stat(state, "grit") == 3


def test_effective_stat_can_exceed_soft_cap() -> None:
    service = _make_character_service()
    state = make_state(stats={"grit": 5, "keen_eye": 2, "charm": 2})
    state.equipped = ["work_gloves", "sturdy_overalls"]

    assert service.get_effective_stat(state, "grit") == 8
