"""Installation aggregate (CQRS): the on-site setup of a delivered order.

State Machine:
    SCHEDULED → {IN_PROGRESS, ON_HOLD, CANCELLED}
    IN_PROGRESS → {ON_HOLD, COMPLETED, CANCELLED}
    ON_HOLD → {SCHEDULED, IN_PROGRESS, COMPLETED, CANCELLED}
    COMPLETED, CANCELLED are terminal

Each piece of equipment carries its own install status. The installation
is COMPLETED exactly when every piece is completed: marking the last piece
completes the installation, and a direct write of COMPLETED is refused while
anything is outstanding. Every status write, whichever path it comes from,
goes through ``_record_status`` and is appended to ``status_history``.
"""

import json
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from playground.domain import playground
from playground.installation.events import (
    CustomerFeedbackSubmitted,
    EquipmentInstallStatusUpdated,
    InstallationCompleted,
    InstallationScheduled,
    InstallationStatusChanged,
    TeamNotesUpdated,
)
from playground.shared.clock import utcnow
from playground.shared.errors import InvalidState, InvalidTransition, NotFound


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class InstallationStatus(Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EquipmentInstallStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


_VALID_TRANSITIONS = {
    InstallationStatus.SCHEDULED: {
        InstallationStatus.IN_PROGRESS,
        InstallationStatus.ON_HOLD,
        InstallationStatus.CANCELLED,
    },
    InstallationStatus.IN_PROGRESS: {
        InstallationStatus.ON_HOLD,
        InstallationStatus.COMPLETED,
        InstallationStatus.CANCELLED,
    },
    InstallationStatus.ON_HOLD: {
        InstallationStatus.SCHEDULED,
        InstallationStatus.IN_PROGRESS,
        InstallationStatus.COMPLETED,
        InstallationStatus.CANCELLED,
    },
    InstallationStatus.COMPLETED: set(),  # terminal
    InstallationStatus.CANCELLED: set(),  # terminal
}

_TERMINAL_STATUSES = {InstallationStatus.COMPLETED, InstallationStatus.CANCELLED}


def parse_installation_status(value) -> InstallationStatus:
    try:
        return InstallationStatus(value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown installation status: {value}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@playground.value_object(part_of="Installation")
class TimeWindow:
    """Arrival window on the scheduled day, as HH:MM text."""

    start = String(max_length=5)
    end = String(max_length=5)


@playground.value_object(part_of="Installation")
class SiteLocation:
    street = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    zip_code = String(max_length=20)
    country = String(max_length=100, default="India")
    latitude = Float()
    longitude = Float()
    landmark = String(max_length=255)
    access_instructions = Text()


@playground.value_object(part_of="Installation")
class CustomerFeedback:
    rating = Integer(required=True)
    comment = Text()
    submitted_at = DateTime()

    @invariant.post
    def rating_must_be_in_range(self):
        if self.rating is not None and (self.rating < 1 or self.rating > 5):
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@playground.entity(part_of="Installation")
class InstallationEquipment:
    """One distinct piece of equipment from the order and its install progress."""

    equipment_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    quantity = Integer(required=True, min_value=1)
    installation_status = String(
        max_length=20,
        choices=EquipmentInstallStatus,
        default=EquipmentInstallStatus.PENDING.value,
    )


@playground.entity(part_of="Installation")
class InstallationStatusEntry:
    status = String(required=True, max_length=20)
    note = String(max_length=500)
    recorded_at = DateTime(required=True)
    sequence = Integer(required=True, min_value=1)
    updated_by = Identifier()


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@playground.aggregate
class Installation:
    order_id = Identifier(required=True, unique=True)
    order_number = String(max_length=20)
    customer_id = Identifier(required=True)
    team_id = Identifier(required=True)
    scheduled_date = DateTime(required=True)
    scheduled_time = ValueObject(TimeWindow)
    status = String(
        max_length=20,
        choices=InstallationStatus,
        default=InstallationStatus.SCHEDULED.value,
    )
    location = ValueObject(SiteLocation)
    equipment_list = HasMany(InstallationEquipment)
    notes = Text()
    team_notes = Text()
    customer_feedback = ValueObject(CustomerFeedback)
    estimated_duration = Float(min_value=0.0)  # hours
    actual_duration = Float()  # hours
    start_time = DateTime()
    completed_date = DateTime()
    status_history = HasMany(InstallationStatusEntry)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def latest_history_entry_matches_status(self):
        latest = self.latest_status_entry
        if latest is not None and latest.status != self.status:
            raise ValidationError({"status_history": [f"Status {self.status} was not recorded in the history"]})

    @invariant.post
    def completed_only_when_all_equipment_installed(self):
        if self.status == InstallationStatus.COMPLETED.value and self.outstanding_equipment:
            raise ValidationError({"status": ["Installation cannot be completed while equipment is outstanding"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def schedule(
        cls,
        order_id: str,
        customer_id: str,
        team_id: str,
        scheduled_date,
        equipment: list[dict],
        order_number: str | None = None,
        scheduled_time: dict | None = None,
        location: dict | None = None,
        estimated_duration: float | None = None,
        notes: str | None = None,
        scheduled_by: str | None = None,
    ):
        """Book an installation; ``equipment`` holds equipment_id, name and quantity per entry."""
        now = utcnow()
        installation = cls(
            order_id=order_id,
            order_number=order_number,
            customer_id=customer_id,
            team_id=team_id,
            scheduled_date=scheduled_date,
            scheduled_time=TimeWindow(**scheduled_time) if scheduled_time else None,
            location=SiteLocation(**location) if location else None,
            estimated_duration=estimated_duration,
            notes=notes,
            status=InstallationStatus.SCHEDULED.value,
            created_at=now,
            updated_at=now,
        )
        for entry in equipment:
            installation.add_equipment_list(
                InstallationEquipment(
                    equipment_id=entry["equipment_id"],
                    name=entry["name"],
                    quantity=entry["quantity"],
                    installation_status=EquipmentInstallStatus.PENDING.value,
                )
            )
        installation.add_status_history(
            InstallationStatusEntry(
                status=InstallationStatus.SCHEDULED.value,
                note="Installation scheduled",
                recorded_at=now,
                sequence=1,
                updated_by=scheduled_by,
            )
        )

        installation.raise_(
            InstallationScheduled(
                installation_id=str(installation.id),
                order_id=str(order_id),
                customer_id=str(customer_id),
                team_id=str(team_id),
                scheduled_date=scheduled_date,
                equipment=json.dumps(equipment),
                scheduled_at=now,
            )
        )
        return installation

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def latest_status_entry(self):
        if not self.status_history:
            return None
        return max(self.status_history, key=lambda entry: entry.sequence or 0)

    @property
    def outstanding_equipment(self) -> list:
        return [
            entry
            for entry in self.equipment_list or []
            if entry.installation_status != EquipmentInstallStatus.COMPLETED.value
        ]

    @property
    def is_terminal(self) -> bool:
        return InstallationStatus(self.status) in _TERMINAL_STATUSES

    def equipment_entry(self, equipment_id):
        return next(
            (entry for entry in self.equipment_list or [] if str(entry.equipment_id) == str(equipment_id)),
            None,
        )

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def _record_status(self, target: InstallationStatus, note: str | None, updated_by) -> None:
        now = utcnow()
        previous = self.status
        sequence = max((entry.sequence or 0 for entry in self.status_history or []), default=0) + 1

        with atomic_change(self):
            self.status = target.value
            self.updated_at = now
            if target == InstallationStatus.IN_PROGRESS and self.start_time is None:
                self.start_time = now
            if target == InstallationStatus.COMPLETED:
                self.completed_date = now
                if self.start_time is not None:
                    self.actual_duration = round((now - self.start_time).total_seconds() / 3600, 2)
            self.add_status_history(
                InstallationStatusEntry(
                    status=target.value,
                    note=note,
                    recorded_at=now,
                    sequence=sequence,
                    updated_by=updated_by,
                )
            )

        self.raise_(
            InstallationStatusChanged(
                installation_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=previous,
                new_status=target.value,
                note=note,
                updated_by=updated_by,
                changed_at=now,
            )
        )
        if target == InstallationStatus.COMPLETED:
            self.raise_(
                InstallationCompleted(
                    installation_id=str(self.id),
                    order_id=str(self.order_id),
                    team_id=str(self.team_id),
                    actual_duration=self.actual_duration,
                    completed_at=now,
                )
            )

    def change_status(self, new_status, note: str | None = None, updated_by=None) -> None:
        target = parse_installation_status(new_status)
        current = InstallationStatus(self.status)
        if current in _TERMINAL_STATUSES:
            raise InvalidTransition({"status": [f"Installation is {current.value} and can no longer change status"]})
        if target != current and target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition({"status": [f"Cannot transition from {current.value} to {target.value}"]})
        if target == InstallationStatus.COMPLETED and self.outstanding_equipment:
            raise InvalidState(
                {"status": [f"{len(self.outstanding_equipment)} equipment item(s) are not installed yet"]}
            )

        self._record_status(target, note, updated_by)

    # -------------------------------------------------------------------
    # Equipment progress
    # -------------------------------------------------------------------
    def update_equipment_status(self, equipment_id, new_status, updated_by=None) -> bool:
        """Set one entry's install status, then complete the installation if nothing is left.

        Returns True when this update completed the installation.
        """
        current = InstallationStatus(self.status)
        if current in _TERMINAL_STATUSES:
            raise InvalidState({"status": [f"Installation is {current.value}; equipment progress is closed"]})

        entry = self.equipment_entry(equipment_id)
        if entry is None:
            raise NotFound({"equipment_id": [f"Equipment {equipment_id} is not part of this installation"]})
        try:
            target = EquipmentInstallStatus(new_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown equipment install status: {new_status}"]}) from None

        now = utcnow()
        previous = entry.installation_status
        entry.installation_status = target.value
        self.updated_at = now
        self.raise_(
            EquipmentInstallStatusUpdated(
                installation_id=str(self.id),
                equipment_id=str(equipment_id),
                previous_status=previous,
                new_status=target.value,
                remaining=len(self.outstanding_equipment),
                updated_at=now,
            )
        )
        return self._recompute_completion(updated_by)

    def _recompute_completion(self, updated_by) -> bool:
        if self.outstanding_equipment or self.status == InstallationStatus.COMPLETED.value:
            return False
        self._record_status(InstallationStatus.COMPLETED, "All equipment installed", updated_by)
        return True

    # -------------------------------------------------------------------
    # Notes and feedback
    # -------------------------------------------------------------------
    def update_team_notes(self, team_notes: str | None) -> None:
        now = utcnow()
        self.team_notes = team_notes
        self.updated_at = now
        self.raise_(TeamNotesUpdated(installation_id=str(self.id), team_notes=team_notes, updated_at=now))

    def submit_feedback(self, rating: int, comment: str | None = None) -> None:
        if self.status != InstallationStatus.COMPLETED.value:
            raise InvalidState({"status": ["Feedback can only be given once the installation is completed"]})

        now = utcnow()
        self.customer_feedback = CustomerFeedback(rating=rating, comment=comment, submitted_at=now)
        self.updated_at = now
        self.raise_(
            CustomerFeedbackSubmitted(
                installation_id=str(self.id),
                customer_id=str(self.customer_id),
                team_id=str(self.team_id),
                rating=rating,
                comment=comment,
                submitted_at=now,
            )
        )
