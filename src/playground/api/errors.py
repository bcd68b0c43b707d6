"""Maps domain and request errors onto the JSON envelope and HTTP status codes."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from playground.shared.errors import Forbidden, Unauthenticated, first_message

logger = structlog.get_logger(__name__)


def _error_details(exc: Exception) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return {key: [str(v) for v in value] if isinstance(value, (list, tuple)) else [str(value)] for key, value in messages.items()}
    if messages:
        return {"detail": [str(messages)]}
    return {}


def error_response(status_code: int, message: str, error: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error or {}},
    )


def _domain_handler(status_code: int):
    async def handler(_request: Request, exc: Exception) -> JSONResponse:
        return error_response(status_code, first_message(exc), _error_details(exc))

    return handler


async def _request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        details.setdefault(field, []).append(error.get("msg", "Invalid value"))
    message = "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in details.items())
    return error_response(400, message or "Invalid request", details)


async def _http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def _conflict_handler(_request: Request, exc: ExpectedVersionError) -> JSONResponse:
    return error_response(409, "The record was modified concurrently, please retry", _error_details(exc))


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error_type=exc.__class__.__name__)
    return error_response(500, "Server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ObjectNotFoundError, _domain_handler(404))
    app.add_exception_handler(Forbidden, _domain_handler(403))
    app.add_exception_handler(Unauthenticated, _domain_handler(401))
    app.add_exception_handler(ValidationError, _domain_handler(400))
    app.add_exception_handler(ExpectedVersionError, _conflict_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
