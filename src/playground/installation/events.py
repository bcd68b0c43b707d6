"""Domain events for the Installation aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from playground.domain import playground


@playground.event(part_of="Installation")
class InstallationScheduled:
    """An administrator booked a team to install a delivered order."""

    __version__ = 1

    installation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    team_id = Identifier(required=True)
    scheduled_date = DateTime(required=True)
    equipment = Text(required=True)  # JSON list of {equipment_id, name, quantity}
    scheduled_at = DateTime(required=True)


@playground.event(part_of="Installation")
class InstallationStatusChanged:
    __version__ = 1

    installation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    note = String()
    updated_by = Identifier()
    changed_at = DateTime(required=True)


@playground.event(part_of="Installation")
class InstallationCompleted:
    """Every piece of equipment on the installation has been installed."""

    __version__ = 1

    installation_id = Identifier(required=True)
    order_id = Identifier(required=True)
    team_id = Identifier(required=True)
    actual_duration = Float()
    completed_at = DateTime(required=True)


@playground.event(part_of="Installation")
class EquipmentInstallStatusUpdated:
    __version__ = 1

    installation_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    remaining = Integer(required=True)
    updated_at = DateTime(required=True)


@playground.event(part_of="Installation")
class TeamNotesUpdated:
    __version__ = 1

    installation_id = Identifier(required=True)
    team_notes = Text()
    updated_at = DateTime(required=True)


@playground.event(part_of="Installation")
class CustomerFeedbackSubmitted:
    """The customer rated a completed installation."""

    __version__ = 1

    installation_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    team_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    submitted_at = DateTime(required=True)
