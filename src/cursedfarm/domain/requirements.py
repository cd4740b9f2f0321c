"""Eligibility predicates for events, searches and hidden areas."""
from __future__ import annotations

from cursedfarm.domain.defs import RequirementsDef
from cursedfarm.domain.state import GameState


def check_event_requirements(state: GameState, requirements: RequirementsDef | None) -> bool:
    """Return True when every populated requirement holds.

    Also used for hidden areas, which share the event requirement vocabulary.
    """
    if requirements is None:
        return True
    if requirements.visit_count is not None:
        if state.current_room_visit_count() < requirements.visit_count:
            return False
    if requirements.has_item and not state.has_item(requirements.has_item):
        return False
    if requirements.has_items and not all(state.has_item(item_id) for item_id in requirements.has_items):
        return False
    if requirements.missing_item and state.has_item(requirements.missing_item):
        return False
    if requirements.has_flag and not state.has_flag(requirements.has_flag):
        return False
    if requirements.missing_flag and state.has_flag(requirements.missing_flag):
        return False
    if requirements.completed_event and not state.is_event_completed(requirements.completed_event):
        return False
    return True


def check_search_requirements(state: GameState, requirements: RequirementsDef | None) -> bool:
    """Searches only honour the item, flag and completed-event requirements."""
    if requirements is None:
        return True
    if requirements.has_item and not state.has_item(requirements.has_item):
        return False
    if requirements.has_flag and not state.has_flag(requirements.has_flag):
        return False
    if requirements.completed_event and not state.is_event_completed(requirements.completed_event):
        return False
    return True
