"""Order aggregate (CQRS): line items, pricing and the order status log.

Status flow:
    pending → confirmed → processing → shipped → delivered
        → installation_scheduled → installation_in_progress → completed
    {pending, confirmed} → cancelled

Administrators may move an order freely between non-terminal statuses.
Cancellation is only possible through ``cancel`` (so stock is always
restored), and a cancelled or completed order never changes status again.
Every status write appends to ``status_history``.
"""

import json
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from playground.domain import playground
from playground.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusUpdated,
)
from playground.order.pricing import price_order
from playground.shared.clock import utcnow
from playground.shared.errors import EmptyOrder, InvalidTransition


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    INSTALLATION_SCHEDULED = "installation_scheduled"
    INSTALLATION_IN_PROGRESS = "installation_in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"
    BANK_TRANSFER = "bank_transfer"


_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

_TERMINAL_STATES = {OrderStatus.CANCELLED, OrderStatus.COMPLETED}


def parse_order_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status: {value}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@playground.value_object(part_of="Order")
class ShippingAddress:
    """Where the order is delivered, captured when the order is placed."""

    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    country = String(max_length=100, default="India")


@playground.value_object(part_of="Order")
class InstallationSite:
    """Optional notes about where on the premises the equipment goes."""

    address = String(max_length=500)
    latitude = Float()
    longitude = Float()
    layout_image = String(max_length=500)
    layout_notes = Text()


@playground.value_object(part_of="Order")
class OrderPricing:
    """Amounts locked when the order is placed; never recomputed."""

    total_amount = Float(default=0.0)
    tax_amount = Float(default=0.0)
    shipping_amount = Float(default=0.0)
    grand_total = Float(default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@playground.entity(part_of="Order")
class OrderItem:
    """Equipment, quantity and the name/price/image it had when ordered."""

    equipment_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=500)
    quantity = Integer(required=True, min_value=1)


@playground.entity(part_of="Order")
class OrderStatusEntry:
    status = String(required=True, max_length=30)
    note = String(max_length=500)
    recorded_at = DateTime(required=True)
    sequence = Integer(required=True, min_value=1)
    updated_by = Identifier()


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@playground.aggregate
class Order:
    order_number = String(required=True, max_length=20, unique=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    shipping_address = ValueObject(ShippingAddress)
    installation_site = ValueObject(InstallationSite)
    status = String(
        max_length=30,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    payment_status = String(
        max_length=20,
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    payment_method = String(
        max_length=20,
        choices=PaymentMethod,
        default=PaymentMethod.COD.value,
    )
    notes = Text()
    status_history = HasMany(OrderStatusEntry)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def latest_history_entry_matches_status(self):
        latest = self.latest_status_entry
        if latest is not None and latest.status != self.status:
            raise ValidationError({"status_history": [f"Status {self.status} was not recorded in the history"]})

    @invariant.post
    def grand_total_is_sum_of_parts(self):
        if self.pricing is None:
            return
        expected = round(
            (self.pricing.total_amount or 0) + (self.pricing.tax_amount or 0) + (self.pricing.shipping_amount or 0),
            2,
        )
        if round(self.pricing.grand_total or 0, 2) != expected:
            raise ValidationError({"pricing": ["Grand total must equal total, tax and shipping combined"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id: str,
        order_number: str,
        lines: list[dict],
        shipping_address: dict,
        payment_method: str | None = None,
        notes: str | None = None,
        installation_site: dict | None = None,
    ):
        """Create a pending order from priced line snapshots.

        ``lines`` holds dicts with equipment_id, name, price, image and quantity.
        Stock is reserved by the caller in the same unit of work.
        """
        if not lines:
            raise EmptyOrder({"items": ["Order must contain at least one item"]})

        now = utcnow()
        pricing = price_order((line["price"], line["quantity"]) for line in lines)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            pricing=OrderPricing(**pricing),
            shipping_address=ShippingAddress(**shipping_address),
            installation_site=InstallationSite(**installation_site) if installation_site else None,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            payment_method=payment_method or PaymentMethod.COD.value,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(OrderItem(**line))
        order.add_status_history(
            OrderStatusEntry(
                status=OrderStatus.PENDING.value,
                note="Order placed",
                recorded_at=now,
                sequence=1,
                updated_by=customer_id,
            )
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                items=json.dumps(lines),
                item_count=len(lines),
                payment_method=order.payment_method,
                placed_at=now,
                **pricing,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def latest_status_entry(self):
        if not self.status_history:
            return None
        return max(self.status_history, key=lambda entry: entry.sequence or 0)

    @property
    def is_cancellable(self) -> bool:
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in _TERMINAL_STATES

    def reservation_lines(self) -> list[tuple[str, int]]:
        return [(str(item.equipment_id), item.quantity) for item in self.items or []]

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def _record_status(self, target: OrderStatus, note: str | None, updated_by) -> None:
        now = utcnow()
        previous = self.status
        sequence = max((entry.sequence or 0 for entry in self.status_history or []), default=0) + 1

        with atomic_change(self):
            self.status = target.value
            self.updated_at = now
            self.add_status_history(
                OrderStatusEntry(
                    status=target.value,
                    note=note,
                    recorded_at=now,
                    sequence=sequence,
                    updated_by=updated_by,
                )
            )

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                note=note,
                updated_by=updated_by,
                changed_at=now,
            )
        )

    def set_status(self, new_status, note: str | None = None, updated_by=None) -> None:
        """Administrative status write between non-terminal statuses."""
        target = parse_order_status(new_status)
        current = OrderStatus(self.status)
        if current in _TERMINAL_STATES:
            raise InvalidTransition({"status": [f"Order is {current.value} and can no longer change status"]})
        if target == OrderStatus.CANCELLED:
            raise InvalidTransition({"status": ["Orders can only be cancelled through cancellation"]})

        self._record_status(target, note, updated_by)

    def cancel(self, cancelled_by, note: str | None = None) -> None:
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise InvalidTransition({"status": [f"Cannot cancel order in {current.value} status"]})

        self._record_status(OrderStatus.CANCELLED, note or "Order cancelled", cancelled_by)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                cancelled_by=str(cancelled_by),
                items=json.dumps(
                    [{"equipment_id": equipment_id, "quantity": quantity} for equipment_id, quantity in self.reservation_lines()]
                ),
                cancelled_at=self.updated_at,
            )
        )

    def follow_installation(self, target: OrderStatus, note: str | None = None, updated_by=None) -> bool:
        """Mirror an installation milestone onto the order.

        Returns False, changing nothing, when the order is already there or
        has reached a terminal status.
        """
        current = OrderStatus(self.status)
        if current == target or current in _TERMINAL_STATES:
            return False
        self._record_status(target, note, updated_by)
        return True

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def update_payment_status(self, payment_status) -> None:
        try:
            target = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError({"payment_status": [f"Unknown payment status: {payment_status}"]}) from None

        now = utcnow()
        previous = self.payment_status
        self.payment_status = target.value
        self.updated_at = now
        self.raise_(
            PaymentStatusUpdated(
                order_id=str(self.id),
                previous_payment_status=previous,
                new_payment_status=target.value,
                updated_at=now,
            )
        )
