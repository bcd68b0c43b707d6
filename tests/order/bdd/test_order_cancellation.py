"""BDD tests for order cancellation."""

from protean import current_domain
from pytest_bdd import scenarios, when

from playground.order.cancellation import CancelOrder

scenarios("features/order_cancellation.feature")


def _cancel(actor, placed, attempt):
    command = CancelOrder(actor_id=actor.user_id, actor_role=actor.role, order_id=placed["order_id"])
    attempt(lambda: current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer cancels the order")
def customer_cancels(customer, placed, attempt):
    _cancel(customer, placed, attempt)


@when("the administrator cancels the order")
def admin_cancels(admin, placed, attempt):
    _cancel(admin, placed, attempt)


@when("another customer cancels the order")
def other_customer_cancels(other_customer, placed, attempt):
    _cancel(other_customer, placed, attempt)
