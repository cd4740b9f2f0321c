from tests.helpers.game_factory import get_services, make_state
from tests.helpers.scripted_rng import ScriptedRNG


def test_ghost_claims_second_part_after_four_room_transitions() -> None:
    services = get_services()
    state = make_state(ScriptedRNG(choices=["head", "ghost", "body"]))
    services.areas.enter_room(state, "farm_gate")

    assert services.curses.apply_curse(state, "ghost").status == "success"
    assert state.curse_clock == 4

    progressions = []
    for room_id in ("farmhouse", "farm_gate", "garden", "farm_gate"):
        progressions.extend(services.areas.enter_room(state, room_id).curse_progressions)

    assert [(p.curse_id, p.body_part, p.stage) for p in progressions] == [("ghost", "body", 2)]
    assert state.curse_clock == 4
    assert state.room_transitions == 5


def test_full_route_to_the_ritual() -> None:
    services = get_services()
    areas = services.areas
    encounters = services.encounters
    state = make_state(stats={"grit": 3, "keen_eye": 6, "charm": 3})

    areas.enter_room(state, "farm_gate")
    mailbox = areas.list_room_actions(state, "farm_gate").search
    assert mailbox is not None
    encounters.begin_search(state, mailbox)
    encounters.take_search_item(state, mailbox, "barn_key")
    encounters.finish_search(state, mailbox)

    areas.enter_room(state, "farmhouse")
    drawers = areas.list_room_actions(state, "farmhouse").search
    assert drawers is not None
    encounters.take_search_item(state, drawers, "old_diary")
    encounters.finish_search(state, drawers)

    barn = areas.enter_room(state, "barn")
    assert barn.arrival_story_key == "barn_entrance"
    assert barn.discovered_area_id == "hayloft"

    diary = next(e for e in areas.list_room_actions(state, "barn").action_events if e.id == "barn_show_diary")
    encounters.perform_auto_action(state, diary)
    assert areas.search_hidden_areas(state, "barn").discovered
    assert "root_cellar" in areas.get_visible_neighbors(state, "barn")

    areas.enter_room(state, "root_cellar")
    shelves = areas.list_room_actions(state, "root_cellar").search
    assert shelves is not None
    encounters.take_search_item(state, shelves, "ritual_candle")
    encounters.finish_search(state, shelves)

    for room_id in ("barn", "pasture", "cornfield"):
        areas.enter_room(state, room_id)
    circle = areas.enter_room(state, "stone_circle")
    assert circle.blocked_by_event_id is None
    assert circle.arrival_story_key == "stone_circle_entrance"

    ritual = areas.list_room_actions(state, "stone_circle").action_events
    assert [event.id for event in ritual] == ["stone_circle_ritual"]
    assert encounters.action_kind(ritual[0]) == "win"
    encounters.perform_win_action(state, ritual[0])

    assert state.game_status == "won"
    assert services.story_repo.has_story_text("game_win")
