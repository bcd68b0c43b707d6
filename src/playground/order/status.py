"""Administrative order status updates: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from playground.access.policy import Actor, require_admin
from playground.domain import playground
from playground.order.order import Order
from playground.order.repository import load_order

logger = structlog.get_logger(__name__)


@playground.command(part_of="Order")
class UpdateOrderStatus:
    """Move an order to another status and log it in the status history."""

    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)
    note = String(max_length=500)


@playground.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        actor = Actor.of(command.actor_id, command.actor_role)
        require_admin(actor)

        repo = current_domain.repository_for(Order)
        order = load_order(repo, command.order_id)
        previous = order.status
        order.set_status(command.status, note=command.note, updated_by=actor.user_id)
        repo.add(order)
        logger.info("Order status updated", order_id=str(order.id), previous=previous, status=order.status)
