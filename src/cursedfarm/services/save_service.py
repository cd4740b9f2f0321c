"""Serialization helpers for slot-based save/load."""
from __future__ import annotations

import copy
import logging
import secrets
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping

from cursedfarm.core.rng import RNG, RNGStatePayload
from cursedfarm.core.types import BODY_PARTS, DIFFICULTIES, GAME_STATUSES
from cursedfarm.data.repositories import RoomsRepository
from cursedfarm.domain.body_map import BodyMap, claim_clear_zone, empty_body_map, is_body_map_full
from cursedfarm.domain.state import DEFAULT_CURSE_CLOCK_INTERVAL, GameState
from cursedfarm.services.errors import SaveLoadError
from cursedfarm.storage.save_slots import SaveSlotStore, SlotMetadata

logger = logging.getLogger(__name__)

SavePayload = Dict[str, Any]

# Browser-era saves used camelCase keys.
_LEGACY_STATE_KEYS = {
    "characterName": "character_name",
    "bonusPointAssigned": "bonus_point_assigned",
    "currentRoom": "current_room_id",
    "visitedRooms": "visited_rooms",
    "roomTransitions": "room_transitions",
    "discoveredHiddenAreas": "discovered_hidden_areas",
    "bodyMap": "body_map",
    "activeCurses": "active_curses",
    "curseClock": "curse_clock",
    "curseClockInterval": "curse_clock_interval",
    "completedEvents": "completed_events",
    "gameStatus": "game_status",
    "searchAttempts": "search_attempts",
    "pendingItems": "pending_items",
    "itemSeed": "item_seed",
    "itemPlacements": "item_placements",
}
_LEGACY_STAT_KEYS = {"keenEye": "keen_eye"}
_LEGACY_STATUSES = {"gameOver": "game_over"}


class SaveService:
    """Converts runtime state to/from a versioned payload and manages slots."""

    SAVE_VERSION = 1

    def __init__(
        self,
        *,
        rooms_repo: RoomsRepository | None = None,
        slot_store: SaveSlotStore | None = None,
    ) -> None:
        self._rooms_repo = rooms_repo
        self._slot_store = slot_store or SaveSlotStore()

    # ----------------------------------------------------------------- Payload
    def serialize(self, state: GameState, slot_number: int | None = None) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        timestamp = datetime.now(timezone.utc).isoformat()
        return {
            "save_version": self.SAVE_VERSION,
            "slot_number": slot_number,
            "timestamp": timestamp,
            "metadata": self._build_metadata(state, timestamp),
            "rng": state.rng.export_state(),
            "state": self._serialize_state(state),
        }

    @staticmethod
    def _serialize_state(state: GameState) -> Dict[str, Any]:
        return {
            state_field.name: copy.deepcopy(getattr(state, state_field.name))
            for state_field in fields(state)
            if state_field.name != "rng"
        }

    def _build_metadata(self, state: GameState, timestamp: str) -> Dict[str, Any]:
        return {
            "character_name": state.character_name or "Unnamed Hero",
            "timestamp": timestamp,
            "current_room_id": state.current_room_id,
            "current_room_name": self._room_name(state.current_room_id),
            "stats": dict(state.stats),
            "game_status": state.game_status,
            "difficulty": state.difficulty,
        }

    def _room_name(self, room_id: str) -> str:
        if self._rooms_repo is None:
            return room_id
        room = self._rooms_repo.find(room_id)
        return room.name if room is not None else room_id

    def deserialize(self, payload: Mapping[str, Any]) -> GameState:
        """Rehydrate a GameState from a current or older save payload."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        version = payload.get("save_version", 0)
        if not isinstance(version, int) or isinstance(version, bool):
            raise SaveLoadError("save_version must be an integer.")
        if version > self.SAVE_VERSION:
            raise SaveLoadError(f"Save format {version} is newer than this version of the game supports.")

        state_payload = payload.get("state", payload.get("gameState"))
        if not isinstance(state_payload, Mapping):
            raise SaveLoadError("Save data is missing the state section.")

        seed_raw = state_payload.get("seed")
        seed = secrets.randbits(32) if seed_raw is None else self._require_int(seed_raw, "state.seed")
        rng = RNG(seed)
        rng_payload = payload.get("rng")
        if rng_payload is not None:
            if not isinstance(rng_payload, Mapping):
                raise SaveLoadError("rng must be an object.")
            try:
                rng.restore_state(self._coerce_rng_payload(rng_payload))
            except ValueError as exc:
                raise SaveLoadError(f"Invalid RNG state: {exc}") from exc

        migrated = self.migrate_state(state_payload, rng)
        state = GameState(seed=seed, rng=rng)
        coercers = self._field_coercers()
        for name, value in migrated.items():
            coerce = coercers.get(name)
            if coerce is None:
                continue
            setattr(state, name, coerce(value, f"state.{name}"))
        return state

    # --------------------------------------------------------------- Migration
    @staticmethod
    def migrate_state(raw: Mapping[str, Any], rng: RNG) -> Dict[str, Any]:
        """Bring an older state section up to the current shape.

        Returns a new dict; running it again on its own output changes nothing.
        Legacy per-curse stage counters are replayed through the claim rules,
        so the rebuilt body map is random rather than an exact restore.
        """
        state: Dict[str, Any] = copy.deepcopy(dict(raw))

        for legacy_key, key in _LEGACY_STATE_KEYS.items():
            if legacy_key in state:
                value = state.pop(legacy_key)
                state.setdefault(key, value)

        stats = state.get("stats")
        if isinstance(stats, Mapping):
            state["stats"] = {_LEGACY_STAT_KEYS.get(name, name): value for name, value in stats.items()}

        status = state.get("game_status")
        if isinstance(status, str):
            state["game_status"] = _LEGACY_STATUSES.get(status, status)

        legacy_stages: Dict[str, int] = {}
        raw_curses = state.get("active_curses")
        if isinstance(raw_curses, Mapping):
            for curse_id, entry in raw_curses.items():
                if isinstance(entry, Mapping):
                    stage = entry.get("current_stage", entry.get("currentStage"))
                    if stage is not None:
                        stage = stage if isinstance(stage, int) and stage > 0 else 1
                        legacy_stages[curse_id] = min(stage, len(BODY_PARTS))
            state["active_curses"] = {curse_id: True for curse_id in raw_curses}
        elif raw_curses is None:
            state["active_curses"] = {}

        if not state.get("body_map"):
            body_map = empty_body_map()
            for curse_id, stage in legacy_stages.items():
                for _ in range(stage):
                    claim_clear_zone(body_map, curse_id, rng)
            state["body_map"] = body_map

        # Every body part owner must be an active curse.
        body_map = state["body_map"]
        active = state["active_curses"]
        if isinstance(body_map, Mapping) and isinstance(active, dict):
            for owner in body_map.values():
                if isinstance(owner, str):
                    active.setdefault(owner, True)

        if not state.get("search_attempts"):
            state["search_attempts"] = {}
        if not state.get("difficulty"):
            state["difficulty"] = "default"
        if not state.get("pending_items"):
            state["pending_items"] = {}

        if state.get("curse_clock") is None:
            interval = state.get("curse_clock_interval") or DEFAULT_CURSE_CLOCK_INTERVAL
            state["curse_clock_interval"] = interval
            state["curse_clock"] = interval if state["active_curses"] else 0
        elif not state["active_curses"]:
            state["curse_clock"] = 0

        if not state.get("item_seed"):
            state["item_seed"] = 0
        if "item_placements" not in state:
            state["item_placements"] = None

        body_map = state["body_map"]
        if isinstance(body_map, Mapping) and is_body_map_full(dict(body_map)):
            state["game_status"] = "game_over"
        return state

    # ------------------------------------------------------------------- Slots
    def save_to_slot(self, state: GameState, slot: int) -> bool:
        try:
            self._slot_store.write_slot(slot, self.serialize(state, slot_number=slot))
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Failed to save slot %d: %s", slot, exc)
            return False
        logger.debug("Game saved to slot %d", slot)
        return True

    def load_from_slot(self, slot: int) -> GameState | None:
        """Return the saved state, or None; the caller keeps its live state on None."""
        try:
            payload = self._slot_store.read_slot(slot)
        except FileNotFoundError:
            logger.debug("No save found in slot %d", slot)
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read slot %d: %s", slot, exc)
            return None
        try:
            state = self.deserialize(payload)
        except SaveLoadError as exc:
            logger.warning("Failed to load slot %d: %s", slot, exc)
            return None
        logger.debug("Game loaded from slot %d", slot)
        return state

    def delete_slot(self, slot: int) -> bool:
        try:
            self._slot_store.delete_slot(slot)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to delete slot %d: %s", slot, exc)
            return False
        return True

    def list_slots(self) -> List[SlotMetadata]:
        return self._slot_store.list_slots()

    def any_saves_exist(self) -> bool:
        return any(slot.exists for slot in self._slot_store.list_slots())

    # --------------------------------------------------------------- Coercion
    def _field_coercers(self) -> Dict[str, Callable[[Any, str], Any]]:
        return {
            "character_name": self._require_str,
            "stats": self._coerce_int_dict,
            "bonus_point_assigned": self._require_bool,
            "inventory": self._coerce_str_list,
            "equipped": self._coerce_str_list,
            "current_room_id": self._require_str,
            "visited_rooms": self._coerce_int_dict,
            "room_transitions": self._require_int,
            "discovered_hidden_areas": self._coerce_str_list,
            "body_map": self._coerce_body_map,
            "active_curses": self._coerce_bool_dict,
            "curse_clock": self._require_int,
            "curse_clock_interval": self._require_int,
            "flags": self._require_dict,
            "completed_events": self._coerce_str_list,
            "game_status": self._require_game_status,
            "search_attempts": self._coerce_int_dict,
            "difficulty": self._require_difficulty,
            "pending_items": self._coerce_pending_items,
            "item_seed": self._require_int,
            "item_placements": self._coerce_optional_dict,
        }

    def _coerce_rng_payload(self, payload: Mapping[str, Any]) -> RNGStatePayload:
        version = self._require_int(payload.get("version"), "rng.version")
        state_values = payload.get("state")
        if not isinstance(state_values, list):
            raise SaveLoadError("Invalid RNG state payload.")
        return {"version": version, "state": state_values, "gauss": payload.get("gauss")}

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: Any, context: str) -> bool:
        if not isinstance(value, bool):
            raise SaveLoadError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_dict(value: Any, context: str) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        return dict(value)

    def _coerce_optional_dict(self, value: Any, context: str) -> Dict[str, Any] | None:
        if value is None:
            return None
        return self._require_dict(value, context)

    @staticmethod
    def _require_game_status(value: Any, context: str) -> Any:
        if value not in GAME_STATUSES:
            raise SaveLoadError(f"Invalid {context} value: {value}")
        return value

    @staticmethod
    def _require_difficulty(value: Any, context: str) -> Any:
        if value not in DIFFICULTIES:
            raise SaveLoadError(f"Invalid {context} value: {value}")
        return value

    @staticmethod
    def _coerce_str_list(value: Any, context: str) -> List[str]:
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        result: List[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise SaveLoadError(f"{context} entries must be strings.")
            result.append(entry)
        return result

    def _coerce_int_dict(self, value: Any, context: str) -> Dict[str, int]:
        mapping = self._require_dict(value, context)
        result: Dict[str, int] = {}
        for key, entry in mapping.items():
            result[key] = self._require_int(entry, f"{context}.{key}")
        return result

    def _coerce_bool_dict(self, value: Any, context: str) -> Dict[str, bool]:
        mapping = self._require_dict(value, context)
        result: Dict[str, bool] = {}
        for key, entry in mapping.items():
            result[key] = self._require_bool(entry, f"{context}.{key}")
        return result

    def _coerce_body_map(self, value: Any, context: str) -> BodyMap:
        mapping = self._require_dict(value, context)
        unknown = set(mapping) - set(BODY_PARTS)
        if unknown:
            raise SaveLoadError(f"{context} has unknown body parts: {sorted(unknown)}")
        body_map = empty_body_map()
        for part in BODY_PARTS:
            owner = mapping.get(part)
            if owner is not None and not isinstance(owner, str):
                raise SaveLoadError(f"{context}.{part} must be a curse id or null.")
            body_map[part] = owner
        return body_map

    def _coerce_pending_items(self, value: Any, context: str) -> Dict[str, List[str]]:
        mapping = self._require_dict(value, context)
        return {room_id: self._coerce_str_list(items, f"{context}.{room_id}") for room_id, items in mapping.items()}
