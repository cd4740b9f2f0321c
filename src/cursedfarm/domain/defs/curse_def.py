"""Curse definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True, slots=True)
class CurseDef:
    id: str
    name: str
    protective_item: str
    body_part_descriptions: Dict[str, str] = field(default_factory=dict)
