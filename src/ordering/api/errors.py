"""Exception-to-HTTP mapping for the order flow.

Protean's own handlers are registered first, then overridden where the
order flow needs a different body (field lists for validation failures,
a fixed message for missing orders).
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.errors import (
    InvalidTransitionError,
    MalformedRequestError,
    OrderCodeConflictError,
    UnauthorizedError,
    UpstreamServiceError,
)

logger = structlog.get_logger(__name__)


def validation_fields(messages) -> list[str]:
    if isinstance(messages, dict):
        return sorted(messages.keys())
    return []


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    messages = getattr(exc, "messages", None) or {}
    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation failed",
            "fields": validation_fields(messages),
            "details": messages if isinstance(messages, dict) else {"body": [str(messages)]},
        },
    )


async def _malformed_request(request: Request, exc: MalformedRequestError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.message})


async def _unauthorized(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"error": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Order not found"})


async def _invalid_transition(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={
            "error": exc.message,
            "current_status": exc.current_status,
            "target_status": exc.target_status,
        },
    )


async def _code_conflict(request: Request, exc: OrderCodeConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": exc.message, "attempts": exc.attempts})


async def _upstream_failure(request: Request, exc: UpstreamServiceError) -> JSONResponse:
    logger.error("upstream.failed", service=exc.service, path=request.url.path)
    content = {"error": exc.message, "service": exc.service}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(MalformedRequestError, _malformed_request)
    app.add_exception_handler(UnauthorizedError, _unauthorized)
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(InvalidTransitionError, _invalid_transition)
    app.add_exception_handler(OrderCodeConflictError, _code_conflict)
    app.add_exception_handler(UpstreamServiceError, _upstream_failure)
