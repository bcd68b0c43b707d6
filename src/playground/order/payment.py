"""Payment status updates: command and handler.

Payment capture happens elsewhere; the order only records the outcome.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from playground.access.policy import Actor, require_admin
from playground.domain import playground
from playground.order.order import Order
from playground.order.repository import load_order


@playground.command(part_of="Order")
class UpdatePaymentStatus:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    order_id = Identifier(required=True)
    payment_status = String(required=True, max_length=20)


@playground.command_handler(part_of=Order)
class UpdatePaymentStatusHandler:
    @handle(UpdatePaymentStatus)
    def update_payment_status(self, command):
        require_admin(Actor.of(command.actor_id, command.actor_role))

        repo = current_domain.repository_for(Order)
        order = load_order(repo, command.order_id)
        order.update_payment_status(command.payment_status)
        repo.add(order)
