"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from playground.domain import playground
from playground.order.order import Order, OrderStatus, PaymentStatus
from playground.shared.errors import NotFound
from playground.shared.queries import paginate, scan


@playground.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def order_number_taken(self, order_number: str) -> bool:
        return self.find_by_order_number(order_number) is not None

    def page(self, page=1, limit=10, customer_id=None, status=None, payment_status=None) -> dict:
        return paginate(
            self._dao,
            page=page,
            limit=limit,
            customer_id=str(customer_id) if customer_id else None,
            status=status,
            payment_status=payment_status,
        )

    def overview(self) -> dict:
        """Order counts per status plus revenue from paid orders."""
        by_status = {
            status.value: self._dao.query.filter(status=status.value).all().total for status in OrderStatus
        }
        paid = scan(self._dao, payment_status=PaymentStatus.PAID.value)
        revenue = round(sum((order.pricing.grand_total or 0.0) for order in paid if order.pricing), 2)
        return {
            "total_orders": sum(by_status.values()),
            "by_status": by_status,
            "paid_orders": len(paid),
            "total_revenue": revenue,
        }


def load_order(repo, order_id) -> Order:
    try:
        return repo.get(order_id)
    except ObjectNotFoundError:
        raise NotFound({"order": [f"Order not found: {order_id}"]}) from None
