"""Shared BDD fixtures and step definitions for orders."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then

from playground.equipment.equipment import Equipment
from playground.equipment.ledger import InventoryLedger
from playground.order.order import Order
from playground.order.status import UpdateOrderStatus
from playground.shared.errors import Forbidden


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def catalog():
    """Equipment ids by name."""
    return {}


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def placed():
    """Holds the id of the order under test."""
    return {"order_id": None}


@pytest.fixture()
def attempt(error):
    """Run an action, recording a domain error instead of raising it."""

    def _attempt(action):
        try:
            return action()
        except (ValidationError, ObjectNotFoundError, Forbidden) as exc:
            error["exc"] = exc
            return None

    return _attempt


def _equipment(catalog, name):
    return current_domain.repository_for(Equipment).get(catalog[name])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('equipment "{name}" priced {price:g} with {stock:d} in stock'))
def equipment_in_stock(catalog, register_equipment, name, price, stock):
    catalog[name] = register_equipment(name=name, price=float(price), stock=stock)


@given(parsers.cfparse('"{name}" has been sold out'))
def sold_out(catalog, name):
    equipment = _equipment(catalog, name)
    if equipment.stock:
        InventoryLedger().reserve(catalog[name], equipment.stock)


@given(parsers.cfparse('the customer has ordered {quantity:d} of "{name}"'))
def customer_has_ordered(catalog, placed, place_order, quantity, name):
    placed["order_id"] = place_order([(catalog[name], quantity)])


@given(parsers.cfparse('the administrator has moved the order to "{status}"'))
def admin_moved_order(placed, admin, status):
    current_domain.process(
        UpdateOrderStatus(actor_id=admin.user_id, actor_role=admin.role, order_id=placed["order_id"], status=status),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def order_has_status(placed, status):
    order = current_domain.repository_for(Order).get(placed["order_id"])
    assert order.status == status
    assert order.latest_status_entry.status == status


@then(parsers.cfparse('the order is rejected with "{error_name}"'))
def order_rejected(error, error_name):
    assert error["exc"] is not None
    assert error["exc"].__class__.__name__ == error_name


@then(parsers.cfparse('"{name}" has {stock:d} in stock'))
def equipment_stock(catalog, name, stock):
    assert _equipment(catalog, name).stock == stock


@then(parsers.cfparse('"{name}" is unavailable'))
def equipment_unavailable(catalog, name):
    assert _equipment(catalog, name).is_available is False


@then(parsers.cfparse('"{name}" is available'))
def equipment_available(catalog, name):
    assert _equipment(catalog, name).is_available is True
