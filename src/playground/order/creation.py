"""Order placement: command and handler.

Stock for every line is reserved in the same unit of work that persists the
order. Nothing is reserved until the request itself has been validated, and
a failure after reservation hands the stock back before propagating.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from playground.access.policy import Actor
from playground.domain import playground
from playground.equipment.ledger import InventoryLedger
from playground.order.numbering import allocate_order_number
from playground.order.order import Order, PaymentMethod, ShippingAddress
from playground.shared.clock import utcnow
from playground.shared.errors import EmptyOrder

logger = structlog.get_logger(__name__)


@playground.command(part_of="Order")
class PlaceOrder:
    """Place an order for one or more pieces of equipment."""

    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    items = Text(required=True)  # JSON list of {equipment_id, quantity}
    shipping_address = Text(required=True)  # JSON object
    payment_method = String(max_length=20)
    notes = Text()
    installation_site = Text()  # JSON object


def _load_json(value):
    return json.loads(value) if isinstance(value, str) else value


def requested_lines(items) -> list[tuple[str, int]]:
    """Validate raw line requests and merge repeated equipment, keeping first-seen order."""
    if not items:
        raise EmptyOrder({"items": ["Order must contain at least one item"]})

    merged: dict[str, int] = {}
    for index, item in enumerate(items):
        equipment_id = item.get("equipment_id")
        quantity = item.get("quantity")
        if not equipment_id:
            raise ValidationError({"items": [f"Line {index + 1} has no equipment reference"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": [f"Line {index + 1} must have a quantity of at least 1"]})
        merged[str(equipment_id)] = merged.get(str(equipment_id), 0) + quantity
    return list(merged.items())


@playground.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        actor = Actor.of(command.actor_id, command.actor_role)
        lines = requested_lines(_load_json(command.items))
        shipping_address = _load_json(command.shipping_address)
        installation_site = _load_json(command.installation_site) if command.installation_site else None
        payment_method = command.payment_method or PaymentMethod.COD.value

        # Reject malformed addresses and payment methods before touching stock
        ShippingAddress(**shipping_address)
        if payment_method not in {m.value for m in PaymentMethod}:
            raise ValidationError({"payment_method": [f"Unknown payment method: {payment_method}"]})

        ledger = InventoryLedger()
        applied = ledger.reserve_all(lines)
        try:
            snapshots = [
                {
                    "equipment_id": str(equipment.id),
                    "name": equipment.name,
                    "price": equipment.price,
                    "image": equipment.image,
                    "quantity": quantity,
                }
                for equipment, quantity in applied
            ]
            orders = current_domain.repository_for(Order)
            order = Order.place(
                customer_id=actor.user_id,
                order_number=allocate_order_number(utcnow(), orders.order_number_taken),
                lines=snapshots,
                shipping_address=shipping_address,
                payment_method=payment_method,
                notes=command.notes,
                installation_site=installation_site,
            )
            orders.add(order)
        except Exception:
            ledger.release(applied)
            raise

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=actor.user_id,
            grand_total=order.pricing.grand_total,
        )
        return str(order.id)
