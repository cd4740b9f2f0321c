"""Repository for room definitions."""
from __future__ import annotations

from typing import Dict, List, Tuple, get_args

from cursedfarm.data.errors import DataReferenceError, DataValidationError
from cursedfarm.data.repositories.base import RepositoryBase
from cursedfarm.data.repositories.items_repo import ItemsRepository
from cursedfarm.domain.defs import (
    AutoEffectDef,
    CheckDef,
    EventDef,
    EventTrigger,
    FailureEffectDef,
    HiddenAreaDef,
    RequirementsDef,
    RoomDef,
    SearchDef,
    SuccessEffectDef,
)

_EVENT_TRIGGERS = set(get_args(EventTrigger))
_REQUIREMENT_FIELDS = {
    "visit_count",
    "has_item",
    "has_items",
    "missing_item",
    "has_flag",
    "missing_flag",
    "completed_event",
}


class RoomsRepository(RepositoryBase[RoomDef]):
    """Loads rooms and validates their connections and references."""

    def __init__(self, base_path=None, *, items_repo: ItemsRepository | None = None) -> None:
        super().__init__("rooms.json", base_path)
        self._items_repo = items_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, RoomDef]:
        staged: Dict[str, dict[str, object]] = {}
        for room_id, payload in raw.items():
            if not isinstance(room_id, str) or not room_id.strip():
                raise DataValidationError("room id must be a non-empty string.")
            staged[room_id] = self._require_mapping(payload, f"room '{room_id}'")

        rooms: Dict[str, RoomDef] = {}
        for room_id, mapping in staged.items():
            context = f"room '{room_id}'"
            name = self._require_str(mapping.get("name"), f"{context} name").strip()
            if not name:
                raise DataValidationError(f"{context} name must not be empty.")

            connections = tuple(self._require_str_list(mapping.get("connections"), f"{context} connections"))
            for target in connections:
                if target not in staged:
                    raise DataReferenceError(f"{context} connection references unknown room '{target}'.")

            hidden_areas = self._parse_hidden_areas(mapping.get("hidden_areas"), context)
            for area in hidden_areas:
                if area.name not in staged:
                    raise DataReferenceError(f"{context} hidden area references unknown room '{area.name}'.")

            rooms[room_id] = RoomDef(
                id=room_id,
                name=name,
                connections=connections,
                events=self._parse_events(mapping.get("events"), context),
                searches=self._parse_searches(mapping.get("searches"), context),
                hidden_areas=hidden_areas,
            )
        return rooms

    def _parse_events(self, raw_events: object, context: str) -> Tuple[EventDef, ...]:
        events: List[EventDef] = []
        for index, entry in enumerate(self._require_list(raw_events, f"{context} events")):
            event_ctx = f"{context} events[{index}]"
            event_data = self._require_mapping(entry, event_ctx)
            trigger = self._require_str(event_data.get("trigger"), f"{event_ctx} trigger")
            if trigger not in _EVENT_TRIGGERS:
                raise DataValidationError(f"{event_ctx} trigger must be one of {sorted(_EVENT_TRIGGERS)}.")
            events.append(
                EventDef(
                    id=self._require_str(event_data.get("id"), f"{event_ctx} id"),
                    trigger=trigger,  # type: ignore[arg-type]
                    story_key=self._optional_str(event_data.get("story_key"), f"{event_ctx} story_key"),
                    action_text=self._optional_str(event_data.get("action_text"), f"{event_ctx} action_text"),
                    one_time=self._optional_bool(event_data.get("one_time"), f"{event_ctx} one_time"),
                    blocks_entry=self._optional_bool(event_data.get("blocks_entry"), f"{event_ctx} blocks_entry"),
                    no_escape=self._optional_bool(event_data.get("no_escape"), f"{event_ctx} no_escape"),
                    completes_on_failure=self._optional_bool(
                        event_data.get("completes_on_failure"), f"{event_ctx} completes_on_failure"
                    ),
                    win_condition=self._optional_bool(
                        event_data.get("win_condition"), f"{event_ctx} win_condition"
                    ),
                    requirements=self._parse_requirements(event_data.get("requirements"), event_ctx),
                    check=self._parse_check(event_data.get("check"), event_ctx),
                    effect=self._parse_auto_effect(event_data.get("effect"), event_ctx),
                )
            )
        return tuple(events)

    def _parse_check(self, raw_check: object, context: str) -> CheckDef | None:
        if raw_check is None:
            return None
        check_ctx = f"{context} check"
        check_data = self._require_mapping(raw_check, check_ctx)
        success_raw = self._require_mapping(check_data.get("success_effect", {}), f"{check_ctx} success_effect")
        failure_raw = self._require_mapping(check_data.get("failure_effect", {}), f"{check_ctx} failure_effect")
        reward_items = tuple(self._require_str_list(success_raw.get("items"), f"{check_ctx} success_effect.items"))
        self._validate_item_references(reward_items, check_ctx)
        difficulty = self._require_int(check_data.get("difficulty"), f"{check_ctx} difficulty")
        if difficulty < 1:
            raise DataValidationError(f"{check_ctx} difficulty must be >= 1.")
        return CheckDef(
            stat=self._require_stat(check_data.get("stat"), f"{check_ctx} stat"),
            difficulty=difficulty,
            success_story=self._require_str(check_data.get("success_story"), f"{check_ctx} success_story"),
            failure_story=self._require_str(check_data.get("failure_story"), f"{check_ctx} failure_story"),
            success_effect=SuccessEffectDef(
                flag=self._optional_str(success_raw.get("flag"), f"{check_ctx} success_effect.flag"),
                items=reward_items,
            ),
            failure_effect=FailureEffectDef(
                curse=self._optional_str(failure_raw.get("curse"), f"{check_ctx} failure_effect.curse"),
            ),
        )

    def _parse_auto_effect(self, raw_effect: object, context: str) -> AutoEffectDef | None:
        if raw_effect is None:
            return None
        effect_ctx = f"{context} effect"
        effect_data = self._require_mapping(raw_effect, effect_ctx)
        self._reject_unknown_fields(effect_data, {"flag", "consume_item", "completes_event"}, effect_ctx)
        return AutoEffectDef(
            flag=self._optional_str(effect_data.get("flag"), f"{effect_ctx} flag"),
            consume_item=self._optional_str(effect_data.get("consume_item"), f"{effect_ctx} consume_item"),
            completes_event=self._optional_str(effect_data.get("completes_event"), f"{effect_ctx} completes_event"),
        )

    def _parse_searches(self, raw_searches: object, context: str) -> Tuple[SearchDef, ...]:
        searches: List[SearchDef] = []
        for index, entry in enumerate(self._require_list(raw_searches, f"{context} searches")):
            search_ctx = f"{context} searches[{index}]"
            search_data = self._require_mapping(entry, search_ctx)
            items = tuple(self._require_str_list(search_data.get("items"), f"{search_ctx} items"))
            self._validate_item_references(items, search_ctx)
            searches.append(
                SearchDef(
                    id=self._require_str(search_data.get("id"), f"{search_ctx} id"),
                    story_key=self._require_str(search_data.get("story_key"), f"{search_ctx} story_key"),
                    search_text=self._optional_str(search_data.get("search_text"), f"{search_ctx} search_text"),
                    items=items,
                    requirements=self._parse_requirements(search_data.get("requirements"), search_ctx),
                )
            )
        return tuple(searches)

    def _parse_hidden_areas(self, raw_areas: object, context: str) -> Tuple[HiddenAreaDef, ...]:
        areas: List[HiddenAreaDef] = []
        for index, entry in enumerate(self._require_list(raw_areas, f"{context} hidden_areas")):
            area_ctx = f"{context} hidden_areas[{index}]"
            area_data = self._require_mapping(entry, area_ctx)
            areas.append(
                HiddenAreaDef(
                    name=self._require_str(area_data.get("name"), f"{area_ctx} name"),
                    luck_threshold=self._require_int(area_data.get("luck_threshold"), f"{area_ctx} luck_threshold"),
                    requirements=self._parse_requirements(area_data.get("requirements"), area_ctx),
                )
            )
        return tuple(areas)

    def _parse_requirements(self, raw_requirements: object, context: str) -> RequirementsDef | None:
        if raw_requirements is None:
            return None
        req_ctx = f"{context} requirements"
        req_data = self._require_mapping(raw_requirements, req_ctx)
        self._reject_unknown_fields(req_data, _REQUIREMENT_FIELDS, req_ctx)
        visit_count = req_data.get("visit_count")
        if visit_count is not None:
            visit_count = self._require_int(visit_count, f"{req_ctx} visit_count")
        return RequirementsDef(
            visit_count=visit_count,
            has_item=self._optional_str(req_data.get("has_item"), f"{req_ctx} has_item"),
            has_items=tuple(self._require_str_list(req_data.get("has_items"), f"{req_ctx} has_items")),
            missing_item=self._optional_str(req_data.get("missing_item"), f"{req_ctx} missing_item"),
            has_flag=self._optional_str(req_data.get("has_flag"), f"{req_ctx} has_flag"),
            missing_flag=self._optional_str(req_data.get("missing_flag"), f"{req_ctx} missing_flag"),
            completed_event=self._optional_str(req_data.get("completed_event"), f"{req_ctx} completed_event"),
        )

    def _validate_item_references(self, item_ids: Tuple[str, ...], context: str) -> None:
        if self._items_repo is None:
            return
        for item_id in item_ids:
            try:
                self._items_repo.get(item_id)
            except KeyError as exc:
                raise DataReferenceError(f"{context} references unknown item '{item_id}'.") from exc

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value
