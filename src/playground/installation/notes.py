"""Team notes on an installation: command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from playground.access.policy import Actor, Role, require_role
from playground.domain import playground
from playground.installation.installation import Installation
from playground.installation.repository import load_installation


@playground.command(part_of="Installation")
class UpdateTeamNotes:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    installation_id = Identifier(required=True)
    team_notes = Text()


@playground.command_handler(part_of=Installation)
class UpdateTeamNotesHandler:
    @handle(UpdateTeamNotes)
    def update_team_notes(self, command):
        require_role(Actor.of(command.actor_id, command.actor_role), Role.ADMIN, Role.INSTALLATION_TEAM)

        repo = current_domain.repository_for(Installation)
        installation = load_installation(repo, command.installation_id)
        installation.update_team_notes(command.team_notes)
        repo.add(installation)
