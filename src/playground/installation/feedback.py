"""Customer feedback on a completed installation: command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from playground.access.policy import Actor, require_owning_customer
from playground.domain import playground
from playground.installation.installation import Installation
from playground.installation.repository import load_installation

logger = structlog.get_logger(__name__)


@playground.command(part_of="Installation")
class SubmitCustomerFeedback:
    actor_id = Identifier(required=True)
    actor_role = String(required=True, max_length=30)
    installation_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()


@playground.command_handler(part_of=Installation)
class SubmitCustomerFeedbackHandler:
    @handle(SubmitCustomerFeedback)
    def submit_feedback(self, command):
        actor = Actor.of(command.actor_id, command.actor_role)

        repo = current_domain.repository_for(Installation)
        installation = load_installation(repo, command.installation_id)
        require_owning_customer(actor, installation.customer_id)

        installation.submit_feedback(command.rating, command.comment)
        repo.add(installation)
        logger.info("Installation feedback received", installation_id=str(installation.id), rating=command.rating)
