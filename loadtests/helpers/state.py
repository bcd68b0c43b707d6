"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state. State tracks the ids
returned by creation endpoints so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class OrderState:
    """Tracks state for a single simulated order lifecycle."""

    customer_id: str | None = None
    order_id: str | None = None
    current_status: str = "pending"
    equipment_ids: list[str] = field(default_factory=list)


@dataclass
class InstallationState:
    """Tracks an order through scheduling and installation."""

    customer_id: str | None = None
    team_id: str | None = None
    order_id: str | None = None
    installation_id: str | None = None
    equipment_ids: list[str] = field(default_factory=list)
    current_status: str = "scheduled"
