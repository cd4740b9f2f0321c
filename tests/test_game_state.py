import logging

import pytest

from tests.helpers.game_factory import make_state


def test_set_flag_and_complete_event_log_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    state = make_state()

    with caplog.at_level(logging.DEBUG, logger="cursedfarm"):
        state.set_flag("calmed_ghost")
        state.complete_event("barn_abigail")
        state.complete_event("barn_abigail")

    assert state.has_flag("calmed_ghost")
    assert state.completed_events == ["barn_abigail"]
    assert "Flag set: calmed_ghost" in caplog.text
    assert caplog.text.count("Event completed: barn_abigail") == 1
