"""Inventory ledger: stock reservation and restoration for orders.

A multi-line order is reserved in two phases. Every line is checked against
current stock first, and only then are decrements applied. If a decrement
(or a later step of the caller) fails, the lines already applied are put
back with ``release`` before the error propagates, so callers never observe
a partial reservation. The ledger runs inside the caller's unit of work, and
versioned writes stop two concurrent orders from consuming the same units.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from playground.equipment.equipment import Equipment
from playground.shared.errors import InsufficientStock, NotFound

logger = structlog.get_logger(__name__)


class InventoryLedger:
    def __init__(self, repository=None):
        self.repository = repository or current_domain.repository_for(Equipment)

    def load(self, equipment_id) -> Equipment:
        try:
            return self.repository.get(equipment_id)
        except ObjectNotFoundError:
            raise NotFound({"equipment": [f"Equipment not found: {equipment_id}"]}) from None

    def reserve(self, equipment_id, quantity: int) -> Equipment:
        equipment = self.load(equipment_id)
        equipment.reserve(quantity)
        self.repository.add(equipment)
        logger.info("Stock reserved", equipment_id=str(equipment_id), quantity=quantity, stock=equipment.stock)
        return equipment

    def restore(self, equipment_id, quantity: int) -> Equipment:
        equipment = self.load(equipment_id)
        equipment.restore(quantity)
        self.repository.add(equipment)
        logger.info("Stock restored", equipment_id=str(equipment_id), quantity=quantity, stock=equipment.stock)
        return equipment

    def reserve_all(self, lines) -> list[tuple[Equipment, int]]:
        """Reserve every ``(equipment_id, quantity)`` line, or none of them.

        Quantities for repeated equipment are combined. Returns the applied
        ``(equipment, quantity)`` pairs in first-seen order.
        """
        demand: dict[str, int] = {}
        for equipment_id, quantity in lines:
            demand[str(equipment_id)] = demand.get(str(equipment_id), 0) + quantity

        catalog = {equipment_id: self.load(equipment_id) for equipment_id in demand}
        for equipment_id, quantity in demand.items():
            equipment = catalog[equipment_id]
            if not equipment.can_supply(quantity):
                raise InsufficientStock(
                    {"stock": [f"Insufficient stock for {equipment.name}: {equipment.stock} available, {quantity} requested"]}
                )

        applied = []
        try:
            for equipment_id, quantity in demand.items():
                equipment = catalog[equipment_id]
                equipment.reserve(quantity)
                self.repository.add(equipment)
                applied.append((equipment, quantity))
        except Exception:
            self.release(applied)
            raise

        logger.info("Stock reserved for order", lines=len(applied))
        return applied

    def release(self, applied) -> None:
        """Undo a reservation made by ``reserve_all``."""
        if applied:
            logger.warning("Releasing reserved stock", lines=len(applied))
        for equipment, quantity in reversed(applied):
            equipment.restore(quantity)
            self.repository.add(equipment)
