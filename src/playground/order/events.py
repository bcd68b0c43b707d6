"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from playground.domain import playground


@playground.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order and its stock was reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of line item snapshots
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    tax_amount = Float(required=True)
    shipping_amount = Float(required=True)
    grand_total = Float(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@playground.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    note = String()
    updated_by = Identifier()
    changed_at = DateTime(required=True)


@playground.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled before shipping; its stock goes back on the shelf."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    cancelled_by = Identifier(required=True)
    items = Text(required=True)  # JSON list of {equipment_id, quantity}
    cancelled_at = DateTime(required=True)


@playground.event(part_of="Order")
class PaymentStatusUpdated:
    """An administrator recorded a new payment status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_payment_status = String(required=True)
    new_payment_status = String(required=True)
    updated_at = DateTime(required=True)
