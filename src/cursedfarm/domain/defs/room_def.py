"""Room definition structures: events, searches and hidden areas."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Tuple

EventTrigger = Literal["first_visit", "action"]


@dataclass(frozen=True, slots=True)
class RequirementsDef:
    """Optional predicates gating an event, search or hidden area.

    Every populated field must hold for the requirements to pass.
    """

    visit_count: int | None = None
    has_item: str | None = None
    has_items: Tuple[str, ...] = ()
    missing_item: str | None = None
    has_flag: str | None = None
    missing_flag: str | None = None
    completed_event: str | None = None


@dataclass(frozen=True, slots=True)
class SuccessEffectDef:
    flag: str | None = None
    items: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FailureEffectDef:
    curse: str | None = None


@dataclass(frozen=True, slots=True)
class CheckDef:
    """Stat check attached to an action event."""

    stat: str
    difficulty: int
    success_story: str
    failure_story: str
    success_effect: SuccessEffectDef = field(default_factory=SuccessEffectDef)
    failure_effect: FailureEffectDef = field(default_factory=FailureEffectDef)


@dataclass(frozen=True, slots=True)
class AutoEffectDef:
    """Effect applied by an action event that needs no roll."""

    flag: str | None = None
    consume_item: str | None = None
    completes_event: str | None = None


@dataclass(frozen=True, slots=True)
class EventDef:
    id: str
    trigger: EventTrigger
    story_key: str | None = None
    action_text: str | None = None
    one_time: bool = False
    blocks_entry: bool = False
    no_escape: bool = False
    completes_on_failure: bool = False
    win_condition: bool = False
    requirements: RequirementsDef | None = None
    check: CheckDef | None = None
    effect: AutoEffectDef | None = None


@dataclass(frozen=True, slots=True)
class SearchDef:
    id: str
    story_key: str
    search_text: str | None = None
    items: Tuple[str, ...] = ()
    requirements: RequirementsDef | None = None


@dataclass(frozen=True, slots=True)
class HiddenAreaDef:
    """A secret room revealed by a keen eye check; ``name`` is its room id."""

    name: str
    luck_threshold: int
    requirements: RequirementsDef | None = None


@dataclass(frozen=True, slots=True)
class RoomDef:
    id: str
    name: str
    connections: Tuple[str, ...] = ()
    events: Tuple[EventDef, ...] = ()
    searches: Tuple[SearchDef, ...] = ()
    hidden_areas: Tuple[HiddenAreaDef, ...] = ()
