"""Tests for scheduling installations and mirroring the order status."""

import json

import pytest
from protean import current_domain

from playground.installation.installation import Installation
from playground.installation.scheduling import ScheduleInstallation
from playground.order.cancellation import CancelOrder
from playground.order.order import Order
from playground.shared.errors import Forbidden, InvalidState, NotFound


@pytest.fixture()
def order_id(register_equipment, place_order):
    slide = register_equipment(name="Tornado Slide", stock=5)
    swing = register_equipment(name="Rainbow Swing", category="Swings", price=5000.0, stock=5)
    return place_order([(slide, 2), (swing, 1)])


def _installation(installation_id):
    return current_domain.repository_for(Installation).get(installation_id)


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestScheduleInstallation:
    def test_installation_created_from_order(self, order_id, schedule_installation, customer, team):
        installation = _installation(schedule_installation(order_id))

        assert installation.status == "scheduled"
        assert installation.order_id == order_id
        assert installation.customer_id == customer.user_id
        assert installation.team_id == team.user_id
        assert installation.order_number == _order(order_id).order_number
        assert sorted((e.name, e.quantity) for e in installation.equipment_list) == [
            ("Rainbow Swing", 1),
            ("Tornado Slide", 2),
        ]
        assert {e.installation_status for e in installation.equipment_list} == {"pending"}

    def test_order_mirrors_scheduling(self, order_id, schedule_installation, admin):
        schedule_installation(order_id)

        order = _order(order_id)
        assert order.status == "installation_scheduled"
        assert order.latest_status_entry.updated_by == admin.user_id

    def test_location_defaults_to_shipping_address(self, order_id, schedule_installation):
        installation = _installation(schedule_installation(order_id))
        assert installation.location.street == "12 Park Lane"
        assert installation.location.city == "Bengaluru"
        assert installation.location.country == "India"

    def test_explicit_location_and_window(self, order_id, schedule_installation):
        installation = _installation(
            schedule_installation(
                order_id,
                location=json.dumps({"street": "Community Park", "city": "Mysuru", "landmark": "Near the lake"}),
                scheduled_time=json.dumps({"start": "10:00", "end": "14:00"}),
                estimated_duration=6.5,
            )
        )
        assert installation.location.city == "Mysuru"
        assert installation.location.landmark == "Near the lake"
        assert installation.scheduled_time.end == "14:00"
        assert installation.estimated_duration == 6.5


class TestScheduleInstallationRejected:
    def test_second_installation_for_order(self, order_id, schedule_installation):
        schedule_installation(order_id)

        with pytest.raises(InvalidState) as exc:
            schedule_installation(order_id)

        assert "already has an installation" in str(exc.value)
        assert current_domain.repository_for(Installation)._dao.query.all().total == 1

    def test_cancelled_order(self, order_id, schedule_installation, customer):
        current_domain.process(
            CancelOrder(actor_id=customer.user_id, actor_role=customer.role, order_id=order_id),
            asynchronous=False,
        )

        with pytest.raises(InvalidState):
            schedule_installation(order_id)

    def test_unknown_order(self, schedule_installation):
        with pytest.raises(NotFound):
            schedule_installation("missing-order")

    def test_non_admin_forbidden(self, order_id, team):
        with pytest.raises(Forbidden):
            current_domain.process(
                ScheduleInstallation(
                    actor_id=team.user_id,
                    actor_role=team.role,
                    order_id=order_id,
                    team_id=team.user_id,
                    scheduled_date="2026-11-02T09:00:00+00:00",
                ),
                asynchronous=False,
            )

        assert _order(order_id).status == "pending"
