"""Installation progress: status changes and per-equipment completion.

Both paths mirror milestones onto the order through the coordinator, in the
same unit of work as the installation change.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from playground.access.policy import Actor, Role, require_assigned_team_or_admin, require_role
from playground.domain import playground
from playground.installation.coordination import OrderInstallationCoordinator
from playground.installation.installation import Installation, InstallationStatus
from playground.installation.repository import load_installation
from playground.shared.errors import Forbidden

logger = structlog.get_logger(__name__)


@playground.command(part_of="Installation")
class UpdateInstallationStatus:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    installation_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    note = String(max_length=500)


@playground.command(part_of="Installation")
class UpdateEquipmentInstallStatus:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    installation_id = Identifier(required=True)
    equipment_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@playground.command_handler(part_of=Installation)
class InstallationProgressHandler:
    @handle(UpdateInstallationStatus)
    def update_status(self, command):
        actor = Actor.of(command.actor_id, command.actor_role)
        repo = current_domain.repository_for(Installation)
        installation = load_installation(repo, command.installation_id)
        require_assigned_team_or_admin(actor, installation.team_id)

        resuming = (
            installation.status == InstallationStatus.ON_HOLD.value
            and command.status != InstallationStatus.ON_HOLD.value
        )
        if resuming and not actor.is_admin:
            raise Forbidden({"status": ["Only an administrator can resume an installation on hold"]})

        previous = installation.status
        installation.change_status(command.status, note=command.note, updated_by=actor.user_id)
        repo.add(installation)
        logger.info(
            "Installation status updated",
            installation_id=str(installation.id),
            previous=previous,
            status=installation.status,
        )

        if installation.status != previous:
            OrderInstallationCoordinator(installations=repo).installation_status_changed(installation, actor.user_id)

    @handle(UpdateEquipmentInstallStatus)
    def update_equipment_status(self, command):
        actor = Actor.of(command.actor_id, command.actor_role)
        require_role(actor, Role.ADMIN, Role.INSTALLATION_TEAM)

        repo = current_domain.repository_for(Installation)
        installation = load_installation(repo, command.installation_id)
        completed = installation.update_equipment_status(command.equipment_id, command.status, updated_by=actor.user_id)
        repo.add(installation)
        logger.info(
            "Equipment install status updated",
            installation_id=str(installation.id),
            equipment_id=str(command.equipment_id),
            status=command.status,
            remaining=len(installation.outstanding_equipment),
        )

        if completed:
            OrderInstallationCoordinator(installations=repo).installation_status_changed(installation, actor.user_id)
