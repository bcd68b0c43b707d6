"""Tests for the Installation aggregate state machine and equipment progress."""

from datetime import UTC, datetime

import pytest
from protean.exceptions import ValidationError

from playground.installation.events import (
    CustomerFeedbackSubmitted,
    InstallationCompleted,
    InstallationScheduled,
    InstallationStatusChanged,
)
from playground.installation.installation import Installation, InstallationStatus
from playground.shared.errors import InvalidState, InvalidTransition, NotFound

_EQUIPMENT = [
    {"equipment_id": "eq-slide", "name": "Tornado Slide", "quantity": 2},
    {"equipment_id": "eq-swing", "name": "Rainbow Swing", "quantity": 1},
]


def _make_installation(status=None, equipment=None):
    installation = Installation.schedule(
        order_id="order-1",
        order_number="PG26100001",
        customer_id="cust-1",
        team_id="team-1",
        scheduled_date=datetime(2026, 11, 2, 9, 0, tzinfo=UTC),
        equipment=equipment or _EQUIPMENT,
        scheduled_time={"start": "09:00", "end": "13:00"},
        scheduled_by="admin-1",
    )
    if status is not None:
        installation.change_status(status, updated_by="admin-1")
    installation._events.clear()
    return installation


def _complete_all(installation):
    for entry in list(installation.equipment_list):
        installation.update_equipment_status(entry.equipment_id, "completed", updated_by="team-1")


class TestSchedule:
    def test_starts_scheduled_with_pending_equipment(self):
        installation = _make_installation()
        assert installation.status == "scheduled"
        assert len(installation.equipment_list) == 2
        assert {e.installation_status for e in installation.equipment_list} == {"pending"}
        assert installation.scheduled_time.start == "09:00"

    def test_first_history_entry(self):
        installation = _make_installation()
        assert len(installation.status_history) == 1
        assert installation.status_history[0].status == "scheduled"
        assert installation.status_history[0].updated_by == "admin-1"

    def test_raises_installation_scheduled(self):
        installation = Installation.schedule(
            order_id="order-1",
            customer_id="cust-1",
            team_id="team-1",
            scheduled_date=datetime(2026, 11, 2, 9, 0, tzinfo=UTC),
            equipment=_EQUIPMENT,
        )
        assert isinstance(installation._events[0], InstallationScheduled)
        assert installation._events[0].team_id == "team-1"


class TestStateMachine:
    @pytest.mark.parametrize(
        "path",
        [
            ["in_progress"],
            ["on_hold"],
            ["cancelled"],
            ["in_progress", "on_hold"],
            ["in_progress", "cancelled"],
            ["on_hold", "scheduled"],
            ["on_hold", "in_progress"],
            ["on_hold", "cancelled"],
        ],
    )
    def test_valid_paths(self, path):
        installation = _make_installation()
        for status in path:
            installation.change_status(status)
        assert installation.status == path[-1]
        assert len(installation.status_history) == len(path) + 1

    def test_scheduled_cannot_jump_to_completed(self):
        installation = _make_installation()
        with pytest.raises(InvalidTransition):
            installation.change_status("completed")

    def test_in_progress_cannot_go_back_to_scheduled(self):
        installation = _make_installation(status="in_progress")
        with pytest.raises(InvalidTransition) as exc:
            installation.change_status("scheduled")
        assert "Cannot transition from in_progress to scheduled" in str(exc.value)

    def test_reaffirming_current_status_is_recorded(self):
        installation = _make_installation(status="in_progress")
        installation.change_status("in_progress", note="Still digging")
        assert installation.status == "in_progress"
        assert installation.latest_status_entry.note == "Still digging"
        assert len(installation.status_history) == 3

    def test_unknown_status(self):
        installation = _make_installation()
        with pytest.raises(ValidationError):
            installation.change_status("abandoned")

    def test_cancelled_is_terminal(self):
        installation = _make_installation(status="cancelled")
        with pytest.raises(InvalidTransition):
            installation.change_status("scheduled")

    def test_completed_with_outstanding_equipment_rejected(self):
        installation = _make_installation(status="in_progress")
        with pytest.raises(InvalidState):
            installation.change_status("completed")
        assert installation.status == "in_progress"
        assert len(installation.status_history) == 2

    def test_status_change_event(self):
        installation = _make_installation()
        installation.change_status("in_progress", updated_by="team-1")
        event = installation._events[0]
        assert isinstance(event, InstallationStatusChanged)
        assert event.previous_status == "scheduled"
        assert event.new_status == "in_progress"

    def test_start_time_stamped_on_first_start(self, clock):
        installation = _make_installation(status="in_progress")
        started = installation.start_time
        assert started is not None

        installation.change_status("on_hold")
        installation.change_status("in_progress")
        assert installation.start_time == started


class TestEquipmentProgress:
    def test_single_item_progress(self):
        installation = _make_installation(status="in_progress")
        completed = installation.update_equipment_status("eq-slide", "completed")
        assert completed is False
        assert installation.equipment_entry("eq-slide").installation_status == "completed"
        assert [e.equipment_id for e in installation.outstanding_equipment] == ["eq-swing"]
        assert installation.status == "in_progress"

    def test_last_item_completes_installation(self, clock):
        installation = _make_installation(status="in_progress")
        clock.advance(hours=3)

        _complete_all(installation)

        assert installation.status == "completed"
        assert installation.latest_status_entry.status == "completed"
        assert installation.completed_date is not None
        assert installation.actual_duration == 3.0
        assert any(isinstance(e, InstallationCompleted) for e in installation._events)

    def test_completing_again_does_not_duplicate_history(self):
        installation = _make_installation(status="in_progress")
        installation.update_equipment_status("eq-slide", "completed")
        installation.update_equipment_status("eq-swing", "in_progress")
        installation.update_equipment_status("eq-swing", "completed")
        assert [e.status for e in installation.status_history].count("completed") == 1

    def test_on_hold_completes_when_last_item_installed(self):
        installation = _make_installation(status="on_hold")
        installation.update_equipment_status("eq-slide", "completed")
        installation.update_equipment_status("eq-swing", "in_progress")
        assert installation.status == "on_hold"

        installation.update_equipment_status("eq-swing", "completed")
        assert installation.status == "completed"

    def test_unknown_equipment(self):
        installation = _make_installation()
        with pytest.raises(NotFound):
            installation.update_equipment_status("eq-seesaw", "completed")

    def test_unknown_equipment_status(self):
        installation = _make_installation()
        with pytest.raises(ValidationError):
            installation.update_equipment_status("eq-slide", "half-done")

    def test_terminal_installation_is_closed(self):
        installation = _make_installation(status="cancelled")
        with pytest.raises(InvalidState):
            installation.update_equipment_status("eq-slide", "completed")


class TestFeedback:
    def test_feedback_requires_completion(self):
        installation = _make_installation(status="in_progress")
        with pytest.raises(InvalidState):
            installation.submit_feedback(5)
        assert installation.customer_feedback is None

    def test_feedback_on_completed_installation(self):
        installation = _make_installation(status="in_progress")
        _complete_all(installation)
        installation._events.clear()

        installation.submit_feedback(4, "Neat work")

        assert installation.customer_feedback.rating == 4
        assert installation.customer_feedback.comment == "Neat work"
        assert isinstance(installation._events[0], CustomerFeedbackSubmitted)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, rating):
        installation = _make_installation(status="in_progress")
        _complete_all(installation)
        with pytest.raises(ValidationError):
            installation.submit_feedback(rating)


class TestTeamNotes:
    def test_team_notes_replaced(self):
        installation = _make_installation()
        installation.update_team_notes("Bring the long drill bits")
        installation.update_team_notes("Gate code 4411")
        assert installation.team_notes == "Gate code 4411"


def test_status_values():
    assert [s.value for s in InstallationStatus] == ["scheduled", "in_progress", "on_hold", "completed", "cancelled"]
