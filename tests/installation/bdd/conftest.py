"""Shared BDD fixtures for installations."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError

from playground.shared.errors import Forbidden


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def attempt(error):
    """Run an action, recording a domain error instead of raising it."""

    def _attempt(action):
        error["exc"] = None
        try:
            return action()
        except (ValidationError, ObjectNotFoundError, Forbidden) as exc:
            error["exc"] = exc
            return None

    return _attempt


@pytest.fixture()
def booking():
    """Ids of the equipment, order and installation under test."""
    return {"equipment": {}, "order_id": None, "installation_id": None}
