"""Items repository."""
from __future__ import annotations

from typing import Dict, get_args

from cursedfarm.data.errors import DataReferenceError, DataValidationError
from cursedfarm.data.repositories.base import RepositoryBase
from cursedfarm.data.repositories.curses_repo import CursesRepository
from cursedfarm.domain.defs import ItemDef, ItemType, StatModifierDef

_ITEM_FIELDS = {
    "name",
    "description",
    "type",
    "stat_boost",
    "stat_penalty",
    "protects_from",
    "curse_effect",
    "can_equip",
    "equip_slot",
    "consumable",
}
_ITEM_TYPES = set(get_args(ItemType))


class ItemsRepository(RepositoryBase[ItemDef]):
    """Loads and validates item definitions."""

    def __init__(self, base_path=None, *, curses_repo: CursesRepository | None = None) -> None:
        super().__init__("items.json", base_path)
        self._curses_repo = curses_repo

    def _build(self, raw: dict[str, object]) -> Dict[str, ItemDef]:
        items: Dict[str, ItemDef] = {}
        for raw_id, payload in raw.items():
            context = f"item '{raw_id}'"
            item_data = self._require_mapping(payload, context)
            self._reject_unknown_fields(item_data, _ITEM_FIELDS, context)

            name = self._require_str(item_data.get("name"), f"{context} name")
            description = self._require_str(item_data.get("description", ""), f"{context} description")
            item_type = self._require_str(item_data.get("type"), f"{context} type")
            if item_type not in _ITEM_TYPES:
                raise DataValidationError(f"{context} type must be one of {sorted(_ITEM_TYPES)}.")

            protects_from = self._optional_str(item_data.get("protects_from"), f"{context} protects_from")
            curse_effect = self._optional_str(item_data.get("curse_effect"), f"{context} curse_effect")
            for curse_ref in (protects_from, curse_effect):
                self._validate_curse_reference(curse_ref, context)

            can_equip = self._optional_bool(item_data.get("can_equip"), f"{context} can_equip")
            equip_slot = self._optional_str(item_data.get("equip_slot"), f"{context} equip_slot")
            if equip_slot is not None and not can_equip:
                raise DataValidationError(f"{context} declares equip_slot but cannot be equipped.")

            items[raw_id] = ItemDef(
                id=raw_id,
                name=name,
                description=description,
                type=item_type,  # type: ignore[arg-type]
                stat_boost=self._parse_modifier(item_data.get("stat_boost"), f"{context} stat_boost"),
                stat_penalty=self._parse_modifier(item_data.get("stat_penalty"), f"{context} stat_penalty"),
                protects_from=protects_from,
                curse_effect=curse_effect,
                can_equip=can_equip,
                equip_slot=equip_slot,
                consumable=self._optional_bool(item_data.get("consumable"), f"{context} consumable"),
            )
        return items

    def _parse_modifier(self, raw_modifier: object, context: str) -> StatModifierDef | None:
        if raw_modifier is None:
            return None
        modifier_data = self._require_mapping(raw_modifier, context)
        self._reject_unknown_fields(modifier_data, {"stat", "amount"}, context)
        stat = self._require_stat(modifier_data.get("stat"), f"{context} stat")
        amount = self._require_int(modifier_data.get("amount"), f"{context} amount")
        return StatModifierDef(stat=stat, amount=amount)

    def _validate_curse_reference(self, curse_id: str | None, context: str) -> None:
        if curse_id is None or self._curses_repo is None:
            return
        try:
            self._curses_repo.get(curse_id)
        except KeyError as exc:
            raise DataReferenceError(f"{context} references unknown curse '{curse_id}'.") from exc
