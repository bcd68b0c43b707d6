"""Playground equipment FastAPI application.

Processes lifecycle commands synchronously over HTTP. Every request runs
inside the playground domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from playground.domain import playground
from playground.utils.logging import clear_context

playground.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Playground Equipment API",
    description="Orders, stock reservation and installation scheduling",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context for each request."""
    clear_context()
    with playground.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers and error envelope
# ---------------------------------------------------------------------------
from playground.api import (  # noqa: E402
    equipment_router,
    installation_router,
    order_router,
    register_exception_handlers,
)

register_exception_handlers(app)
app.include_router(equipment_router)
app.include_router(order_router)
app.include_router(installation_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": playground.name})
