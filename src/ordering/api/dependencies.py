"""Request plumbing shared by the order and email routers."""

import hmac
import json

from fastapi import Header, Request
from starlette.concurrency import run_in_threadpool

from ordering.config import Settings
from ordering.domain import ordering
from ordering.errors import MalformedRequestError, UnauthorizedError
from ordering.order.lifecycle import OrderLifecycle, TransitionResult


async def read_json(request: Request) -> dict:
    """Parse the body as a JSON object; an empty body counts as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedRequestError("Invalid JSON") from exc
    if not isinstance(payload, dict):
        raise MalformedRequestError("Expected a JSON object")
    return payload


async def run_operation(operation, payload: dict) -> TransitionResult:
    """Run a lifecycle operation on the threadpool.

    Store writes and vendor email calls block, so they stay off the event loop.
    The worker thread gets its own ordering domain context.
    """

    def call():
        with ordering.domain_context():
            return operation(payload)

    return await run_in_threadpool(call)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_lifecycle(request: Request) -> OrderLifecycle:
    return request.app.state.lifecycle


def require_admin_token(request: Request, authorization: str | None = Header(default=None)) -> None:
    """Bearer-token check for operator routes. Fails closed when no token is configured."""
    expected = get_settings(request).admin_token
    scheme, _, token = (authorization or "").partition(" ")
    if not expected or scheme.lower() != "bearer":
        raise UnauthorizedError()
    if not hmac.compare_digest(token.strip().encode(), expected.encode()):
        raise UnauthorizedError()
