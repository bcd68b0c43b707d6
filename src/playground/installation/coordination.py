"""Keeps an order's status in step with its installation.

Installation handlers call the coordinator inside their own unit of work, so
the installation change and the mirrored order change commit together. The
Installation aggregate never loads or writes orders itself.

    installation scheduled    → order installation_scheduled
    installation in_progress  → order installation_in_progress
    installation completed    → order completed
"""

import structlog
from protean.utils.globals import current_domain

from playground.installation.installation import Installation, InstallationStatus
from playground.installation.repository import InstallationRepository
from playground.order.order import Order, OrderStatus
from playground.order.repository import load_order
from playground.shared.errors import InvalidState

logger = structlog.get_logger(__name__)

_FOLLOWED_STATUSES = {
    InstallationStatus.IN_PROGRESS: OrderStatus.INSTALLATION_IN_PROGRESS,
    InstallationStatus.COMPLETED: OrderStatus.COMPLETED,
}


class OrderInstallationCoordinator:
    def __init__(self, orders=None, installations: InstallationRepository | None = None):
        self.orders = orders or current_domain.repository_for(Order)
        self.installations = installations or current_domain.repository_for(Installation)

    def order_for_scheduling(self, order_id) -> Order:
        """Load an order that may still receive an installation."""
        order = load_order(self.orders, order_id)
        if order.is_terminal:
            raise InvalidState({"order": [f"Cannot schedule an installation for a {order.status} order"]})
        if self.installations.find_for_order(order.id) is not None:
            raise InvalidState({"order": [f"Order {order.order_number} already has an installation"]})
        return order

    def installation_scheduled(self, order: Order, installation, updated_by) -> None:
        self._follow(order, OrderStatus.INSTALLATION_SCHEDULED, f"Installation {installation.id} scheduled", updated_by)

    def installation_status_changed(self, installation, updated_by) -> bool:
        target = _FOLLOWED_STATUSES.get(InstallationStatus(installation.status))
        if target is None:
            return False
        order = load_order(self.orders, installation.order_id)
        return self._follow(order, target, f"Installation {installation.status}", updated_by)

    def _follow(self, order: Order, target: OrderStatus, note: str, updated_by) -> bool:
        previous = order.status
        if not order.follow_installation(target, note=note, updated_by=updated_by):
            logger.warning(
                "Order status not mirrored",
                order_id=str(order.id),
                order_status=previous,
                target=target.value,
            )
            return False

        self.orders.add(order)
        logger.info("Order status mirrored from installation", order_id=str(order.id), previous=previous, status=target.value)
        return True
