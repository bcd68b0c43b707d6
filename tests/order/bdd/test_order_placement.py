"""BDD tests for order placement."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

from playground.order.order import Order

scenarios("features/order_placement.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.re(r'the customer orders (?P<quantity>\d+) of "(?P<name>[^"]+)"'),
    converters={"quantity": int},
)
def order_one(catalog, placed, place_order, attempt, quantity, name):
    placed["order_id"] = attempt(lambda: place_order([(catalog[name], quantity)]))


@when(
    parsers.re(
        r'the customer orders (?P<first_qty>\d+) of "(?P<first>[^"]+)" and (?P<second_qty>\d+) of "(?P<second>[^"]+)"'
    ),
    converters={"first_qty": int, "second_qty": int},
)
def order_two(catalog, placed, place_order, attempt, first_qty, first, second_qty, second):
    lines = [(catalog[first], first_qty), (catalog[second], second_qty)]
    placed["order_id"] = attempt(lambda: place_order(lines))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
def _pricing(placed):
    return current_domain.repository_for(Order).get(placed["order_id"]).pricing


@then(parsers.cfparse("the order total is {amount:g}"))
def order_total(placed, amount):
    assert _pricing(placed).total_amount == amount


@then(parsers.cfparse("the order tax is {amount:g}"))
def order_tax(placed, amount):
    assert _pricing(placed).tax_amount == amount


@then(parsers.cfparse("the order shipping is {amount:g}"))
def order_shipping(placed, amount):
    assert _pricing(placed).shipping_amount == amount


@then(parsers.cfparse("the order grand total is {amount:g}"))
def order_grand_total(placed, amount):
    assert _pricing(placed).grand_total == amount


@then("no order has been placed")
def no_order(placed):
    assert placed["order_id"] is None
    assert current_domain.repository_for(Order)._dao.query.all().total == 0
