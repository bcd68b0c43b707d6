"""Installation scheduling: command and handler."""

import json

import structlog
from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from playground.access.policy import Actor, require_admin
from playground.domain import playground
from playground.installation.coordination import OrderInstallationCoordinator
from playground.installation.installation import Installation

logger = structlog.get_logger(__name__)


@playground.command(part_of="Installation")
class ScheduleInstallation:
    """Book an installation team for an order."""

    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    order_id = Identifier(required=True)
    team_id = Identifier(required=True)
    scheduled_date = DateTime(required=True)
    scheduled_time = Text()  # JSON {start, end}
    location = Text()  # JSON SiteLocation fields; defaults to the order's address
    estimated_duration = Float(min_value=0.0)
    notes = Text()


def location_from_order(order) -> dict:
    """Installation site derived from where the order is shipped."""
    address = order.shipping_address
    site = order.installation_site
    location = {}
    if address is not None:
        location.update(
            street=address.street,
            city=address.city,
            state=address.state,
            zip_code=address.zip_code,
            country=address.country,
        )
    if site is not None:
        location.update(latitude=site.latitude, longitude=site.longitude)
        if site.layout_notes:
            location["access_instructions"] = site.layout_notes
    return location


@playground.command_handler(part_of=Installation)
class ScheduleInstallationHandler:
    @handle(ScheduleInstallation)
    def schedule_installation(self, command):
        actor = Actor.of(command.actor_id, command.actor_role)
        require_admin(actor)

        coordinator = OrderInstallationCoordinator()
        order = coordinator.order_for_scheduling(command.order_id)

        location = json.loads(command.location) if command.location else location_from_order(order)
        installation = Installation.schedule(
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            team_id=str(command.team_id),
            scheduled_date=command.scheduled_date,
            equipment=[
                {"equipment_id": str(item.equipment_id), "name": item.name, "quantity": item.quantity}
                for item in order.items
            ],
            scheduled_time=json.loads(command.scheduled_time) if command.scheduled_time else None,
            location=location,
            estimated_duration=command.estimated_duration,
            notes=command.notes,
            scheduled_by=actor.user_id,
        )
        current_domain.repository_for(Installation).add(installation)
        coordinator.installation_scheduled(order, installation, actor.user_id)

        logger.info(
            "Installation scheduled",
            installation_id=str(installation.id),
            order_id=str(order.id),
            team_id=str(command.team_id),
        )
        return str(installation.id)
