"""Faker-based data generators for Locust load test scenarios.

Payloads match the field names of the API's Pydantic request schemas and
pass the domain's validation rules. Bearer tokens are minted with PyJWT, so
the target server must run with IDENTITY_RESOLVER=jwt and the same
JWT_SECRET.
"""

import os
import random
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from faker import Faker

fake = Faker()

JWT_SECRET = os.environ.get("JWT_SECRET", "loadtest-secret-change-me-please-32b")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")

CATEGORIES = [
    "Swings",
    "Slides",
    "Climbing Equipment",
    "Seesaws",
    "Merry-Go-Rounds",
    "Spring Riders",
    "Playhouses",
]

# ---------- Identity ----------


def bearer(user_id: str, role: str) -> dict:
    """Authorization header for a user with the given role."""
    token = jwt.encode(
        {"sub": user_id, "role": role, "exp": datetime.now(UTC) + timedelta(hours=2)},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


def customer_id() -> str:
    return f"cust-lt-{uuid.uuid4().hex[:8]}"


def team_id() -> str:
    return f"team-lt-{random.randint(1, 5)}"


# ---------- Equipment ----------


def equipment_data(stock: int | None = None) -> dict:
    """Generate RegisterEquipmentRequest payload."""
    return {
        "name": f"{fake.color_name()} {random.choice(['Slide', 'Swing', 'Dome', 'Fort', 'Rocker'])}"[:100],
        "category": random.choice(CATEGORIES),
        "price": round(random.uniform(4000, 60000), 2),
        "stock": stock if stock is not None else random.randint(20, 200),
        "description": fake.sentence(),
        "installation_time_days": random.randint(1, 3),
    }


# ---------- Orders ----------


def shipping_address() -> dict:
    return {
        "name": fake.name()[:100],
        "phone": f"9{random.randint(100000000, 999999999)}",
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "zip_code": fake.postcode()[:20],
    }


def order_data(equipment_ids: list[str], max_quantity: int = 2) -> dict:
    """Generate PlaceOrderRequest payload for one or more pieces of equipment."""
    lines = random.sample(equipment_ids, k=min(len(equipment_ids), random.randint(1, 3)))
    return {
        "items": [{"equipment_id": eid, "quantity": random.randint(1, max_quantity)} for eid in lines],
        "shipping_address": shipping_address(),
        "payment_method": random.choice(["cod", "online", "bank_transfer"]),
        "installation_site": {"address": fake.address()[:500], "layout_notes": fake.sentence()},
    }


# ---------- Installations ----------


def schedule_data(order_id: str, team: str) -> dict:
    """Generate ScheduleInstallationRequest payload."""
    scheduled = datetime.now(UTC) + timedelta(days=random.randint(3, 30))
    return {
        "order_id": order_id,
        "team_id": team,
        "scheduled_date": scheduled.replace(hour=9, minute=0, second=0, microsecond=0).isoformat(),
        "scheduled_time": {"start": "09:00", "end": "13:00"},
        "estimated_duration": float(random.randint(2, 8)),
    }
