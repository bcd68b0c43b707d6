"""Repository for the Installation aggregate."""

from protean.exceptions import ObjectNotFoundError

from playground.domain import playground
from playground.installation.installation import Installation, InstallationStatus
from playground.shared.errors import NotFound
from playground.shared.queries import paginate, scan


@playground.repository(part_of=Installation)
class InstallationRepository:
    def find_for_order(self, order_id) -> Installation | None:
        return self._dao.query.filter(order_id=str(order_id)).all().first

    def page(self, page=1, limit=10, team_id=None, customer_id=None, status=None) -> dict:
        return paginate(
            self._dao,
            page=page,
            limit=limit,
            team_id=str(team_id) if team_id else None,
            customer_id=str(customer_id) if customer_id else None,
            status=status,
        )

    def team_schedule(self, team_id, start=None, end=None) -> list[Installation]:
        """Non-cancelled installations for a team, earliest first, optionally within [start, end]."""
        installations = scan(self._dao, order_by="scheduled_date", team_id=str(team_id))
        return [
            installation
            for installation in installations
            if installation.status != InstallationStatus.CANCELLED.value
            and (start is None or installation.scheduled_date >= start)
            and (end is None or installation.scheduled_date <= end)
        ]

    def overview(self) -> dict:
        by_status = {
            status.value: self._dao.query.filter(status=status.value).all().total for status in InstallationStatus
        }
        return {"total_installations": sum(by_status.values()), "by_status": by_status}


def load_installation(repo, installation_id) -> Installation:
    try:
        return repo.get(installation_id)
    except ObjectNotFoundError:
        raise NotFound({"installation": [f"Installation not found: {installation_id}"]}) from None
