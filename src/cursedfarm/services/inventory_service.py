"""Inventory, equipment and consumable orchestration."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Literal

from cursedfarm.data.repositories import ItemsRepository
from cursedfarm.domain.defs import ItemDef
from cursedfarm.domain.state import GameState
from cursedfarm.services.curse_service import CurseApplyResult, CurseService

logger = logging.getLogger(__name__)

CLEANSING_POTION_ID = "potion_of_cleansing"

ConsumableStatus = Literal["cleansed", "choose_curse", "nothing_to_cleanse", "no_effect", "not_usable"]


@dataclass(slots=True)
class ItemPickupResult:
    """What happened when an item entered the inventory."""

    item_id: str
    added: bool
    curse_result: CurseApplyResult | None = None
    cured_curse_id: str | None = None


@dataclass(slots=True)
class ConsumableResult:
    status: ConsumableStatus
    item_id: str
    consumed: bool = False
    cleansed_curse_id: str | None = None
    curse_choices: List[str] = field(default_factory=list)


class InventoryService:
    """Moves items between the ground, the inventory and the equipped list."""

    def __init__(self, items_repo: ItemsRepository, curse_service: CurseService) -> None:
        self._items_repo = items_repo
        self._curse_service = curse_service

    # ------------------------------------------------------------------ Pickup
    def add_item(self, state: GameState, item_id: str) -> ItemPickupResult:
        item = self._items_repo.find(item_id)
        if item is None:
            logger.warning("Ignoring unknown item '%s'", item_id)
            return ItemPickupResult(item_id=item_id, added=False)
        if state.has_item(item_id):
            return ItemPickupResult(item_id=item_id, added=False)

        state.inventory.append(item_id)
        logger.debug("Added %s to inventory", item_id)
        result = ItemPickupResult(item_id=item_id, added=True)

        if item.curse_effect:
            result.curse_result = self._curse_service.apply_curse(state, item.curse_effect)
        result.cured_curse_id = self._cure_if_protective(state, item)
        return result

    def remove_item(self, state: GameState, item_id: str) -> bool:
        if item_id not in state.inventory:
            return False
        state.inventory.remove(item_id)
        logger.debug("Removed %s from inventory", item_id)
        return True

    # --------------------------------------------------------------- Equipment
    def equip_item(self, state: GameState, item_id: str) -> bool:
        item = self._items_repo.find(item_id)
        if item is None or not item.can_equip:
            return False
        if item_id not in state.inventory:
            return False

        if item.equip_slot:
            conflict_id = next(
                (
                    equipped_id
                    for equipped_id in state.equipped
                    if self._slot_of(equipped_id) == item.equip_slot
                ),
                None,
            )
            if conflict_id is not None:
                self.unequip_item(state, conflict_id)

        state.inventory.remove(item_id)
        state.equipped.append(item_id)
        logger.debug("Equipped %s", item_id)
        self._cure_if_protective(state, item)
        return True

    def unequip_item(self, state: GameState, item_id: str) -> bool:
        """Return an equipped item to the inventory; cured curses stay cured."""
        if item_id not in state.equipped:
            return False
        state.equipped.remove(item_id)
        state.inventory.append(item_id)
        logger.debug("Unequipped %s", item_id)
        return True

    def _slot_of(self, item_id: str) -> str | None:
        item = self._items_repo.find(item_id)
        return item.equip_slot if item is not None else None

    def _cure_if_protective(self, state: GameState, item: ItemDef) -> str | None:
        if item.type != "protective" or not item.protects_from:
            return None
        if not self._curse_service.remove_curse(state, item.protects_from):
            return None
        logger.debug("%s fully cured %s", item.name, item.protects_from)
        return item.protects_from

    # ------------------------------------------------------------- Consumables
    def use_consumable(self, state: GameState, item_id: str, curse_id: str | None = None) -> ConsumableResult:
        item = self._items_repo.find(item_id)
        if item is None or not item.consumable or item_id not in state.inventory:
            return ConsumableResult(status="not_usable", item_id=item_id)
        if item_id != CLEANSING_POTION_ID:
            logger.warning("No use handler for consumable: %s", item_id)
            return ConsumableResult(status="no_effect", item_id=item_id)

        active = list(state.active_curses)
        if not active:
            return ConsumableResult(status="nothing_to_cleanse", item_id=item_id)
        if curse_id is None and len(active) == 1:
            curse_id = active[0]
        if curse_id is None or curse_id not in state.active_curses:
            return ConsumableResult(status="choose_curse", item_id=item_id, curse_choices=active)

        self._curse_service.remove_curse(state, curse_id)
        self.remove_item(state, item_id)
        return ConsumableResult(status="cleansed", item_id=item_id, consumed=True, cleansed_curse_id=curse_id)

    # ----------------------------------------------------------- Pending items
    @staticmethod
    def add_pending_items(state: GameState, room_id: str, item_ids: Iterable[str]) -> None:
        pending = state.pending_items.setdefault(room_id, [])
        for item_id in item_ids:
            if item_id not in pending:
                pending.append(item_id)

    @staticmethod
    def remove_pending_item(state: GameState, room_id: str, item_id: str) -> bool:
        pending = state.pending_items.get(room_id)
        if not pending or item_id not in pending:
            return False
        pending.remove(item_id)
        if not pending:
            del state.pending_items[room_id]
        return True

    def claim_pending_item(self, state: GameState, room_id: str, item_id: str) -> ItemPickupResult:
        if item_id not in state.pending_items.get(room_id, []):
            return ItemPickupResult(item_id=item_id, added=False)
        result = self.add_item(state, item_id)
        self.remove_pending_item(state, room_id, item_id)
        return result

    def get_item(self, item_id: str) -> ItemDef | None:
        return self._items_repo.find(item_id)
