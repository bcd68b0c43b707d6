"""BDD tests for the installation lifecycle and order mirroring."""

from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from playground.installation.feedback import SubmitCustomerFeedback
from playground.installation.installation import Installation
from playground.installation.progress import UpdateEquipmentInstallStatus, UpdateInstallationStatus
from playground.order.order import Order

scenarios("features/installation_lifecycle.feature")


def _installation(booking):
    return current_domain.repository_for(Installation).get(booking["installation_id"])


def _move(actor, booking, attempt, status):
    command = UpdateInstallationStatus(
        actor_id=actor.user_id,
        actor_role=actor.role,
        installation_id=booking["installation_id"],
        status=status,
    )
    attempt(lambda: current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an order for 1 "{first}" and 1 "{second}"'))
def order_for_two(booking, register_equipment, place_order, first, second):
    for name in (first, second):
        booking["equipment"][name] = register_equipment(name=name, stock=3)
    booking["order_id"] = place_order([(booking["equipment"][first], 1), (booking["equipment"][second], 1)])


@given("an installation scheduled for the team")
def installation_scheduled(booking, schedule_installation):
    booking["installation_id"] = schedule_installation(booking["order_id"])


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the team moves the installation to "{status}"'))
def team_moves(team, booking, attempt, status):
    _move(team, booking, attempt, status)


@when(parsers.cfparse('another team moves the installation to "{status}"'))
def other_team_moves(other_team, booking, attempt, status):
    _move(other_team, booking, attempt, status)


@when(parsers.cfparse('the administrator moves the installation to "{status}"'))
def admin_moves(admin, booking, attempt, status):
    _move(admin, booking, attempt, status)


@when(parsers.cfparse('the team marks "{name}" as "{status}"'))
def team_marks(team, booking, attempt, name, status):
    command = UpdateEquipmentInstallStatus(
        actor_id=team.user_id,
        actor_role=team.role,
        installation_id=booking["installation_id"],
        equipment_id=booking["equipment"][name],
        status=status,
    )
    attempt(lambda: current_domain.process(command, asynchronous=False))


@when(parsers.cfparse("the customer rates the installation {rating:d}"))
def customer_rates(customer, booking, attempt, rating):
    command = SubmitCustomerFeedback(
        actor_id=customer.user_id,
        actor_role=customer.role,
        installation_id=booking["installation_id"],
        rating=rating,
    )
    attempt(lambda: current_domain.process(command, asynchronous=False))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the installation is "{status}"'))
def installation_status(booking, status):
    installation = _installation(booking)
    assert installation.status == status
    assert installation.latest_status_entry.status == status


@then(parsers.cfparse('the order is "{status}"'))
def order_status(booking, status):
    assert current_domain.repository_for(Order).get(booking["order_id"]).status == status


@then(parsers.cfparse('the request is rejected with "{error_name}"'))
def request_rejected(error, error_name):
    assert error["exc"] is not None
    assert error["exc"].__class__.__name__ == error_name


@then(parsers.cfparse("the installation history has {count:d} entry"))
def history_size(booking, count):
    assert len(_installation(booking).status_history) == count


@then(parsers.cfparse("the installation has a rating of {rating:d}"))
def has_rating(booking, rating):
    assert _installation(booking).customer_feedback.rating == rating
