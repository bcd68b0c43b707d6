"""Equipment aggregate: a catalog item whose stock is reserved by orders.

Stock is only ever moved through ``reserve`` and ``restore``. Availability
follows stock: the moment stock reaches zero the item is marked unavailable,
and any restore makes it available again.
"""

from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from playground.domain import playground
from playground.equipment.events import (
    EquipmentRegistered,
    EquipmentSoldOut,
    StockReserved,
    StockRestored,
)
from playground.shared.clock import utcnow
from playground.shared.errors import InsufficientStock


class EquipmentCategory(Enum):
    SWINGS = "Swings"
    SLIDES = "Slides"
    CLIMBING_EQUIPMENT = "Climbing Equipment"
    SEESAWS = "Seesaws"
    MERRY_GO_ROUNDS = "Merry-Go-Rounds"
    SPRING_RIDERS = "Spring Riders"
    PLAYHOUSES = "Playhouses"
    SAND_PLAY = "Sand Play"
    WATER_PLAY = "Water Play"
    SPORTS_EQUIPMENT = "Sports Equipment"
    FITNESS_EQUIPMENT = "Fitness Equipment"
    INCLUSIVE_PLAY = "Inclusive Play"
    OTHER = "Other"


@playground.aggregate
class Equipment:
    name = String(required=True, max_length=100)
    description = Text()
    category = String(required=True, max_length=50, choices=EquipmentCategory)
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    is_available = Boolean(default=True)
    installation_required = Boolean(default=True)
    installation_time_days = Integer(default=1, min_value=0)
    image = String(max_length=500, default="no-image.jpg")
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def sold_out_equipment_is_unavailable(self):
        if self.stock == 0 and self.is_available:
            raise ValidationError({"is_available": ["Equipment with no stock cannot be available"]})

    @classmethod
    def register(
        cls,
        name: str,
        category: str,
        price: float,
        stock: int = 0,
        description: str | None = None,
        installation_required: bool = True,
        installation_time_days: int = 1,
        image: str | None = None,
    ):
        now = utcnow()
        equipment = cls(
            name=name,
            category=category,
            price=price,
            stock=stock,
            is_available=stock > 0,
            description=description,
            installation_required=installation_required,
            installation_time_days=installation_time_days,
            image=image or "no-image.jpg",
            created_at=now,
            updated_at=now,
        )
        equipment.raise_(
            EquipmentRegistered(
                equipment_id=str(equipment.id),
                name=name,
                category=category,
                price=price,
                stock=stock,
                registered_at=now,
            )
        )
        return equipment

    def can_supply(self, quantity: int) -> bool:
        return bool(self.is_available) and self.stock >= quantity

    def reserve(self, quantity: int) -> None:
        """Take ``quantity`` units out of stock."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})
        if not self.can_supply(quantity):
            raise InsufficientStock({"stock": [f"Insufficient stock for {self.name}"]})

        now = utcnow()
        previous = self.stock
        with atomic_change(self):
            self.stock = previous - quantity
            if self.stock == 0:
                self.is_available = False
            self.updated_at = now

        self.raise_(
            StockReserved(
                equipment_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                reserved_at=now,
            )
        )
        if self.stock == 0:
            self.raise_(EquipmentSoldOut(equipment_id=str(self.id), sold_out_at=now))

    def restore(self, quantity: int) -> None:
        """Put ``quantity`` units back; the equipment becomes available unconditionally."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        now = utcnow()
        previous = self.stock
        with atomic_change(self):
            self.stock = previous + quantity
            self.is_available = True
            self.updated_at = now

        self.raise_(
            StockRestored(
                equipment_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock,
                restored_at=now,
            )
        )
