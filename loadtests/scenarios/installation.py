"""Installation load test scenarios.

One journey per simulated order: the administrator schedules a team, the
team works through every piece of equipment, and the customer rates the
result. The order status should end at ``completed``.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import bearer, customer_id, order_data, schedule_data, team_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import InstallationState
from loadtests.scenarios.ordering import ADMIN, register_equipment


class InstallationJourney(SequentialTaskSet):
    """Place Order -> Schedule -> Start -> Install Each Item -> Feedback."""

    def on_start(self):
        self.state = InstallationState(customer_id=customer_id(), team_id=team_id())
        self.customer = bearer(self.state.customer_id, "customer")
        self.team = bearer(self.state.team_id, "installation_team")

    @task
    def place_order(self):
        equipment_id = register_equipment(self.client)
        if equipment_id is None:
            self.interrupt()
        with self.client.post(
            "/orders",
            json=order_data([equipment_id]),
            headers=self.customer,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                data = resp.json()["data"]
                self.state.order_id = data["id"]
                self.state.equipment_ids = [item["equipment_id"] for item in data["items"]]
            else:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def schedule(self):
        with self.client.post(
            "/installations",
            json=schedule_data(self.state.order_id, self.state.team_id),
            headers=ADMIN,
            catch_response=True,
            name="POST /installations",
        ) as resp:
            if resp.status_code == 201:
                self.state.installation_id = resp.json()["data"]["id"]
            else:
                resp.failure(f"Schedule failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def start(self):
        with self.client.put(
            f"/installations/{self.state.installation_id}/status",
            json={"status": "in_progress", "note": "Crew on site"},
            headers=self.team,
            catch_response=True,
            name="PUT /installations/{id}/status",
        ) as resp:
            if resp.status_code == 200:
                self.state.current_status = "in_progress"
            else:
                resp.failure(f"Start failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def install_equipment(self):
        for equipment_id in self.state.equipment_ids:
            with self.client.put(
                f"/installations/{self.state.installation_id}/equipment-status",
                json={"equipment_id": equipment_id, "status": "completed"},
                headers=self.team,
                catch_response=True,
                name="PUT /installations/{id}/equipment-status",
            ) as resp:
                if resp.status_code == 200:
                    self.state.current_status = resp.json()["data"]["status"]
                else:
                    resp.failure(f"Equipment update failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def feedback(self):
        if self.state.current_status != "completed":
            self.interrupt()
        with self.client.put(
            f"/installations/{self.state.installation_id}/feedback",
            json={"rating": 5, "comment": "Load test feedback"},
            headers=self.customer,
            catch_response=True,
            name="PUT /installations/{id}/feedback",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Feedback failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def team_schedule(self):
        self.client.get("/installations/team/schedule", headers=self.team, name="GET /installations/team/schedule")

    @task
    def done(self):
        self.interrupt()


class InstallationUser(HttpUser):
    wait_time = between(1, 3)
    tasks = [InstallationJourney]
