"""Item definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ItemType = Literal["key", "quest", "protective", "equipment", "cursed", "consumable"]


@dataclass(frozen=True, slots=True)
class StatModifierDef:
    stat: str
    amount: int


@dataclass(frozen=True, slots=True)
class ItemDef:
    """Static description of an item the player can carry."""

    id: str
    name: str
    description: str
    type: ItemType
    stat_boost: StatModifierDef | None = None
    stat_penalty: StatModifierDef | None = None
    protects_from: str | None = None
    curse_effect: str | None = None
    can_equip: bool = False
    equip_slot: str | None = None
    consumable: bool = False
