"""Curses repository."""
from __future__ import annotations

from typing import Dict

from cursedfarm.core.types import BODY_PARTS
from cursedfarm.data.errors import DataValidationError
from cursedfarm.data.repositories.base import RepositoryBase
from cursedfarm.domain.defs import CurseDef


class CursesRepository(RepositoryBase[CurseDef]):
    """Loads and validates curse definitions."""

    def __init__(self, base_path=None) -> None:
        super().__init__("curses.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, CurseDef]:
        curses: Dict[str, CurseDef] = {}
        for curse_id, payload in raw.items():
            context = f"curse '{curse_id}'"
            curse_data = self._require_mapping(payload, context)
            self._reject_unknown_fields(
                curse_data, {"name", "protective_item", "body_part_descriptions"}, context
            )
            name = self._require_str(curse_data.get("name"), f"{context} name")
            protective_item = self._require_str(
                curse_data.get("protective_item"), f"{context} protective_item"
            )
            descriptions_raw = curse_data.get("body_part_descriptions", {})
            descriptions = self._require_mapping(descriptions_raw, f"{context} body_part_descriptions")
            unknown_parts = set(descriptions) - set(BODY_PARTS)
            if unknown_parts:
                raise DataValidationError(
                    f"{context} body_part_descriptions has unknown parts: {sorted(unknown_parts)}."
                )
            curses[curse_id] = CurseDef(
                id=curse_id,
                name=name,
                protective_item=protective_item,
                body_part_descriptions={
                    part: self._require_str(text, f"{context} body_part_descriptions.{part}")
                    for part, text in descriptions.items()
                },
            )
        return curses
