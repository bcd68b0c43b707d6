import os
from datetime import UTC, datetime
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def playground_bed():
    from playground.domain import playground

    bed = DomainFixture(playground)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(playground_bed):
    """Run every test inside the domain context and wipe stores afterwards."""
    from protean import current_domain

    with playground_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _reset_adapters():
    from playground.access import reset_identity_resolver
    from playground.directory import reset_user_directory
    from playground.shared.clock import reset_clock

    yield
    reset_clock()
    reset_identity_resolver()
    reset_user_directory()


# ---------------------------------------------------------------------------
# Clock and actors
# ---------------------------------------------------------------------------
@pytest.fixture()
def clock():
    from playground.shared.clock import FixedClock, set_clock

    fixed = FixedClock(datetime(2026, 10, 5, 9, 30, tzinfo=UTC))
    set_clock(fixed)
    return fixed


@pytest.fixture()
def admin():
    from playground.access.policy import Actor

    return Actor(user_id="admin-1", role="admin")


@pytest.fixture()
def customer():
    from playground.access.policy import Actor

    return Actor(user_id="cust-1", role="customer")


@pytest.fixture()
def other_customer():
    from playground.access.policy import Actor

    return Actor(user_id="cust-2", role="customer")


@pytest.fixture()
def team():
    from playground.access.policy import Actor

    return Actor(user_id="team-1", role="installation_team")


@pytest.fixture()
def other_team():
    from playground.access.policy import Actor

    return Actor(user_id="team-2", role="installation_team")


# ---------------------------------------------------------------------------
# Command shortcuts
# ---------------------------------------------------------------------------
SHIPPING_ADDRESS = {
    "name": "Asha Rao",
    "phone": "9876543210",
    "street": "12 Park Lane",
    "city": "Bengaluru",
    "state": "Karnataka",
    "zip_code": "560001",
}


@pytest.fixture()
def shipping_address():
    return dict(SHIPPING_ADDRESS)


@pytest.fixture()
def register_equipment(admin):
    """Register equipment through the command and return its id."""
    from protean import current_domain

    from playground.equipment.registration import RegisterEquipment

    def _register(name="Tornado Slide", price=10000.0, stock=5, category="Slides", **extra):
        return current_domain.process(
            RegisterEquipment(
                actor_id=admin.user_id,
                actor_role=admin.role,
                name=name,
                category=category,
                price=price,
                stock=stock,
                **extra,
            ),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def place_order(customer):
    """Place an order for ``[(equipment_id, quantity), ...]`` and return its id."""
    import json

    from protean import current_domain

    from playground.order.creation import PlaceOrder

    def _place(lines, actor=None, **extra):
        actor = actor or customer
        return current_domain.process(
            PlaceOrder(
                actor_id=actor.user_id,
                actor_role=actor.role,
                items=json.dumps([{"equipment_id": eid, "quantity": qty} for eid, qty in lines]),
                shipping_address=json.dumps(extra.pop("shipping_address", SHIPPING_ADDRESS)),
                **extra,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def schedule_installation(admin, team):
    """Schedule an installation for an order and return its id."""
    from protean import current_domain

    from playground.installation.scheduling import ScheduleInstallation

    def _schedule(order_id, team_id=None, **extra):
        return current_domain.process(
            ScheduleInstallation(
                actor_id=admin.user_id,
                actor_role=admin.role,
                order_id=order_id,
                team_id=team_id or team.user_id,
                scheduled_date=extra.pop("scheduled_date", datetime(2026, 11, 2, 9, 0, tzinfo=UTC)),
                **extra,
            ),
            asynchronous=False,
        )

    return _schedule
