import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from playground.access import get_identity_resolver
from playground.api import equipment_router, installation_router, order_router, register_exception_handlers


def _app():
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(equipment_router)
    app.include_router(order_router)
    app.include_router(installation_router)
    return app


@pytest.fixture()
def client():
    return TestClient(_app())


@pytest.fixture()
def lenient_client():
    """Client that returns 500 responses instead of re-raising server errors."""
    return TestClient(_app(), raise_server_exceptions=False)


@pytest.fixture()
def auth():
    """Build an Authorization header for ``(user_id, role)``."""

    def _auth(user_id, role):
        token = get_identity_resolver().issue(user_id, role)
        return {"Authorization": f"Bearer {token}"}

    return _auth


@pytest.fixture()
def admin_headers(auth):
    return auth("admin-1", "admin")


@pytest.fixture()
def customer_headers(auth):
    return auth("cust-1", "customer")


@pytest.fixture()
def team_headers(auth):
    return auth("team-1", "installation_team")
