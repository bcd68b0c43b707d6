"""Order cancellation: command and handler.

Only the customer who placed the order, or an administrator, may cancel it,
and only while it is pending or confirmed. Every line's stock is restored in
the same unit of work that records the cancellation.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from playground.access.policy import Actor, require_owner_or_admin
from playground.domain import playground
from playground.equipment.ledger import InventoryLedger
from playground.order.order import Order
from playground.order.repository import load_order

logger = structlog.get_logger(__name__)


@playground.command(part_of="Order")
class CancelOrder:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@playground.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        actor = Actor.of(command.actor_id, command.actor_role)

        repo = current_domain.repository_for(Order)
        order = load_order(repo, command.order_id)
        require_owner_or_admin(actor, order.customer_id, resource="order")

        order.cancel(actor.user_id, note=command.reason)

        ledger = InventoryLedger()
        for equipment_id, quantity in order.reservation_lines():
            ledger.restore(equipment_id, quantity)

        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id), cancelled_by=actor.user_id)
