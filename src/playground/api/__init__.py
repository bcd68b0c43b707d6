"""Playground HTTP API package."""

from playground.api.errors import register_exception_handlers
from playground.api.routes import equipment_router, installation_router, order_router

__all__ = ["equipment_router", "order_router", "installation_router", "register_exception_handlers"]
