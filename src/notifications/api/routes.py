"""FastAPI route for sending an arbitrary transactional email.

Not tied to any order; the storefront uses it for contact forms and
one-off messages.
"""

import structlog
from fastapi import APIRouter, Request
from protean.exceptions import ValidationError
from starlette.concurrency import run_in_threadpool

from notifications.api.schemas import EmailSentResponse
from notifications.channel.email_port import EmailPort
from ordering.api.dependencies import read_json
from ordering.errors import UpstreamServiceError
from ordering.order.address import clean_text, snake_keys

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/emails", tags=["emails"])


def _email_channel(request: Request) -> EmailPort:
    return request.app.state.email_channel


def parse_email_request(payload: dict) -> dict:
    data = snake_keys(payload)
    message = {
        "to": clean_text(data.get("to")),
        "subject": clean_text(data.get("subject")),
        "body": clean_text(data.get("text")),
        "html_body": clean_text(data.get("html")),
        "cc": clean_text(data.get("cc")),
        "bcc": clean_text(data.get("bcc")),
        "reply_to": clean_text(data.get("reply_to")),
    }

    errors = {}
    if not message["to"]:
        errors["to"] = ["is required"]
    if not message["subject"]:
        errors["subject"] = ["is required"]
    if not message["body"] and not message["html_body"]:
        errors["text"] = ["text or html is required"]
    if errors:
        raise ValidationError(errors)
    return message


@router.post("", response_model=EmailSentResponse)
async def send_email(request: Request) -> EmailSentResponse:
    message = parse_email_request(await read_json(request))
    channel = _email_channel(request)

    result = await run_in_threadpool(channel.send, **message)
    if result.get("status") != "sent":
        logger.warning("email.failed", error=result.get("error"), status_code=result.get("status_code"))
        raise UpstreamServiceError(
            "email",
            result.get("error") or "Email delivery failed",
            details=result.get("details"),
        )

    logger.info("email.sent", message_id=result.get("message_id"))
    return EmailSentResponse(result=result)
