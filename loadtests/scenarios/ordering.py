"""Order load test scenarios.

OrderLifecycleJourney walks one order through every administrative status.
ScarceStockUser has many customers race for a handful of units and cancel
half of what they win, which exercises the all-or-nothing reservation and
the retry on version conflicts.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import bearer, customer_id, equipment_data, order_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import OrderState

ADMIN = bearer("admin-lt", "admin")

_ADMIN_STATUSES = ["confirmed", "processing", "shipped", "delivered"]


def register_equipment(client, stock=None) -> str | None:
    with client.post(
        "/equipment",
        json=equipment_data(stock=stock),
        headers=ADMIN,
        catch_response=True,
        name="POST /equipment",
    ) as resp:
        if resp.status_code == 201:
            return resp.json()["data"]["id"]
        resp.failure(f"Register equipment failed: {resp.status_code}: {extract_error_detail(resp)}")
        return None


class OrderLifecycleJourney(SequentialTaskSet):
    """Register Equipment -> Place Order -> Pay -> Confirm ... Deliver."""

    def on_start(self):
        self.state = OrderState(customer_id=customer_id())
        self.headers = bearer(self.state.customer_id, "customer")

    @task
    def register(self):
        equipment_id = register_equipment(self.client)
        if equipment_id is None:
            self.interrupt()
        self.state.equipment_ids.append(equipment_id)

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.equipment_ids),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["data"]["id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def mark_paid(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/payment",
            json={"payment_status": "paid"},
            headers=ADMIN,
            catch_response=True,
            name="PUT /orders/{id}/payment",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Payment update failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def advance(self):
        for status in _ADMIN_STATUSES:
            with self.client.put(
                f"/orders/{self.state.order_id}/status",
                json={"status": status},
                headers=ADMIN,
                catch_response=True,
                name="PUT /orders/{id}/status",
            ) as resp:
                if resp.status_code == 200:
                    self.state.current_status = status
                else:
                    resp.failure(f"Status {status} failed: {resp.status_code}: {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def read_back(self):
        self.client.get(f"/orders/{self.state.order_id}", headers=self.headers, name="GET /orders/{id}")
        self.client.get("/orders/my-orders", headers=self.headers, name="GET /orders/my-orders")

    @task
    def done(self):
        self.interrupt()


class OrderUser(HttpUser):
    wait_time = between(1, 3)
    tasks = [OrderLifecycleJourney]


class ScarceStockUser(HttpUser):
    """Many customers ordering from the same small stock pile.

    An out-of-stock rejection (400) is an expected outcome, not a failure.
    """

    wait_time = between(0.1, 0.5)
    shared_equipment: list[str] = []

    def on_start(self):
        if not ScarceStockUser.shared_equipment:
            equipment_id = register_equipment(self.client, stock=25)
            if equipment_id:
                ScarceStockUser.shared_equipment.append(equipment_id)
        self.headers = bearer(customer_id(), "customer")

    @task(3)
    def race_for_stock(self):
        if not self.shared_equipment:
            return
        with self.client.post(
            "/orders",
            json=order_data(self.shared_equipment, max_quantity=3),
            headers=self.headers,
            catch_response=True,
            name="[SCARCE] POST /orders",
        ) as resp:
            if resp.status_code == 201:
                if random.random() < 0.5:
                    self._cancel(resp.json()["data"]["id"])
            elif resp.status_code in (400, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}: {extract_error_detail(resp)}")

    def _cancel(self, order_id):
        with self.client.put(
            f"/orders/{order_id}/cancel",
            json={"reason": "Load test cancellation"},
            headers=self.headers,
            catch_response=True,
            name="[SCARCE] PUT /orders/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task(1)
    def check_equipment(self):
        if self.shared_equipment:
            self.client.get(
                f"/equipment/{self.shared_equipment[0]}",
                headers=self.headers,
                name="[SCARCE] GET /equipment/{id}",
            )
