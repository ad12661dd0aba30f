"""Order lifecycle service: runs each transition in two phases.

1. commit: validate the request, then process the domain command. Anything
   that fails here aborts the operation.
2. notify: send the customer (and fulfillment) emails. Failures are logged
   and reported in the result but never undo the committed change.
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime

import structlog
from protean.exceptions import ProteanException, ValidationError
from protean.utils.globals import current_domain

from notifications.channel import build_email_channel
from notifications.channel.email_port import EmailPort
from notifications.templates import get_template
from notifications.templates.kinds import NotificationType
from ordering.config import Settings
from ordering.errors import InvalidTransitionError, OrderFlowError, UpstreamServiceError
from ordering.order.address import clean_text, snake_keys
from ordering.order.carriers import tracking_link
from ordering.order.instructions import payment_instructions
from ordering.order.order import Order, OrderStatus, PaymentConfirmation
from ordering.order.payment import AttachPaymentProof, MarkOrderPaid
from ordering.order.placement import PlaceOrder
from ordering.order.pricing import compute_total, reconcile_total
from ordering.order.submission import parse_submission
from ordering.order.tracking import AssignTracking
from ordering.proof import build_proof_store
from ordering.proof.datauri import decode_data_uri, proof_key
from ordering.proof.port import ProofStore

logger = structlog.get_logger(__name__)

PROOF_STORED_MESSAGE = "Proof image stored."
PROOF_REFERENCED_MESSAGE = "Proof reference recorded."
MAX_REFERENCE_LENGTH = 2048

# Request key -> field name reported back in validation errors
PROOF_REFERENCE_FIELDS = {"proof_key": "proofKey", "proof_url": "proofUrl"}


@dataclass
class NotificationOutcome:
    recipient: str
    template: str
    status: str
    message_id: str | None = None
    error: str | None = None

    @property
    def sent(self) -> bool:
        return self.status == "sent"


@dataclass
class TransitionResult:
    """What a lifecycle operation did.

    ``state_changed`` reports the committed change; ``notifications`` reports
    each best-effort email separately.
    """

    order_id: str
    state_changed: bool
    notifications: list[NotificationOutcome] = field(default_factory=list)
    data: dict = field(default_factory=dict)

    def notifications_as_dicts(self) -> list[dict]:
        return [asdict(outcome) for outcome in self.notifications]


def _request_object(payload) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError({"body": ["Expected a JSON object"]})
    return snake_keys(payload)


def _order_id(data: dict) -> str | None:
    for key in ("id", "order_id"):
        value = clean_text(data.get(key))
        if value:
            return value
    return None


def _proof_reference(data: dict) -> tuple[str | None, str | None]:
    """Return ``(field, reference)`` for an externally uploaded proof, if one was sent."""
    for key, field_name in PROOF_REFERENCE_FIELDS.items():
        if data.get(key) is not None:
            value = data[key]
            return field_name, clean_text(value) if isinstance(value, str) else None
    return None, None


class OrderLifecycle:
    def __init__(self, settings: Settings, email: EmailPort, proof_store: ProofStore):
        self.settings = settings
        self.email = email
        self.proof_store = proof_store

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrderLifecycle":
        return cls(settings, build_email_channel(settings), build_proof_store(settings))

    # -------------------------------------------------------------------
    # Phase helpers
    # -------------------------------------------------------------------
    def _store_call(self, func, *args, **kwargs):
        """Call into the order store, reporting infrastructure failures as upstream errors."""
        try:
            return func(*args, **kwargs)
        except (ProteanException, OrderFlowError):
            raise
        except Exception as exc:
            logger.exception("order_store.failed", error_type=type(exc).__name__)
            raise UpstreamServiceError(
                "order_store",
                "Order store unavailable",
                details={"error_type": type(exc).__name__},
                status_code=500,
            ) from exc

    def _commit(self, command):
        return self._store_call(current_domain.process, command, asynchronous=False)

    def _notify(self, recipient: str, notification_type: NotificationType, context: dict) -> NotificationOutcome:
        order_id = context.get("order_id")

        try:
            content = get_template(notification_type.value).render(context)
            result = self.email.send(
                to=recipient,
                subject=content["subject"],
                body=content["body"],
                html_body=content.get("html"),
                reply_to=self.settings.support_email,
            )
        except Exception as exc:
            # Best-effort: the order change is already committed.
            logger.exception(
                "notification.failed",
                order_id=order_id,
                template=notification_type.value,
                error_type=type(exc).__name__,
            )
            return NotificationOutcome(
                recipient=recipient,
                template=notification_type.value,
                status="failed",
                error=type(exc).__name__,
            )

        if result.get("status") != "sent":
            logger.warning(
                "notification.failed",
                order_id=order_id,
                template=notification_type.value,
                error=result.get("error"),
            )
            return NotificationOutcome(
                recipient=recipient,
                template=notification_type.value,
                status="failed",
                error=result.get("error") or "Email delivery failed",
            )

        logger.info(
            "notification.sent",
            order_id=order_id,
            template=notification_type.value,
            message_id=result.get("message_id"),
        )
        return NotificationOutcome(
            recipient=recipient,
            template=notification_type.value,
            status="sent",
            message_id=result.get("message_id"),
        )

    def _template_context(self, summary: dict, **extra) -> dict:
        return {
            **summary,
            "store_name": self.settings.store_name,
            "support_email": self.settings.support_email,
            **extra,
        }

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------
    def place_order(self, payload) -> TransitionResult:
        submission = parse_submission(payload, default_country=self.settings.default_country)

        computed = compute_total(submission.items)
        total, flagged = reconcile_total(computed, submission.client_total, self.settings.total_mismatch_policy)
        if flagged:
            logger.warning(
                "order.total_mismatch",
                computed_total=computed,
                client_total=submission.client_total,
                email=submission.email,
            )

        summary = self._commit(
            PlaceOrder(
                email=submission.email,
                name=submission.name,
                phone=submission.phone,
                shipping_address=json.dumps(submission.shipping_address),
                billing_address=json.dumps(submission.billing_address),
                items=json.dumps(submission.items),
                payment_method=submission.payment_method,
                total=total,
                client_total=submission.client_total,
                total_flagged=flagged,
                currency=self.settings.currency,
            )
        )

        instructions = payment_instructions(summary["payment_method"], summary["order_code"], summary["total"])
        context = self._template_context(summary, payment_instructions=instructions)

        notifications = [self._notify(summary["email"], NotificationType.ORDER_RECEIVED, context)]
        if self.settings.fulfillment_email:
            notifications.append(
                self._notify(self.settings.fulfillment_email, NotificationType.FULFILLMENT_REQUEST, context)
            )

        return TransitionResult(
            order_id=summary["order_id"],
            state_changed=True,
            notifications=notifications,
            data={**summary, "payment_instructions": instructions},
        )

    def mark_paid(self, payload) -> TransitionResult:
        """Operator confirmation of payment. Sends no notification."""
        data = _request_object(payload)
        order_id = _order_id(data)
        if order_id is None:
            raise ValidationError({"id": ["is required"]})

        summary = self._commit(
            MarkOrderPaid(
                order_id=order_id,
                payment_proof=clean_text(data.get("payment_proof")),
                confirmed_by=PaymentConfirmation.OPERATOR.value,
            )
        )
        changed = summary.pop("changed")
        return TransitionResult(order_id=summary["order_id"], state_changed=changed, data=summary)

    def attach_proof(self, payload, now: datetime | None = None) -> TransitionResult:
        """Record a proof of payment on the order.

        The proof is either an inline image (``imageData``), which is decoded and
        written to the Proof Store, or a reference to an image uploaded
        elsewhere (``proofKey``/``proofUrl``), which is recorded as given.
        """
        data = _request_object(payload)
        order_id = _order_id(data)
        image_data = data.get("image_data") or data.get("data_url")
        reference_field, reference = _proof_reference(data)

        errors = {}
        if order_id is None:
            errors["orderId"] = ["is required"]
        if reference_field is not None:
            if image_data:
                errors[reference_field] = ["cannot be combined with imageData"]
            elif reference is None:
                errors[reference_field] = ["must be a non-empty string"]
            elif len(reference) > MAX_REFERENCE_LENGTH:
                errors[reference_field] = [f"cannot exceed {MAX_REFERENCE_LENGTH} characters"]
        elif not image_data:
            errors["imageData"] = ["is required"]
        elif not isinstance(image_data, str):
            errors["imageData"] = ["must be a data URL or base64 string"]
        if errors:
            raise ValidationError(errors)

        if reference is None:
            now = now or datetime.now(UTC)
            mime, content = decode_data_uri(image_data)
            key = proof_key(order_id, int(now.timestamp() * 1000), mime)

        repo = current_domain.repository_for(Order)
        order = self._store_call(repo.get, order_id)
        if order.status == OrderStatus.CANCELLED.value:
            raise InvalidTransitionError(order.status, OrderStatus.PAID.value)

        if reference is None:
            try:
                reference = self.proof_store.put(key, content, mime)
            except OSError as exc:
                logger.error("proof.store_failed", order_id=order_id, key=key, error_type=type(exc).__name__)
                raise UpstreamServiceError("proof_store", "Upload failed.") from exc
            logger.info("proof.stored", order_id=order_id, key=reference, content_type=mime, size=len(content))
            message = PROOF_STORED_MESSAGE
        else:
            logger.info("proof.referenced", order_id=order_id, key=reference)
            message = PROOF_REFERENCED_MESSAGE

        summary = self._commit(
            AttachPaymentProof(
                order_id=order_id,
                proof_reference=reference,
                mark_paid=self.settings.proof_marks_paid,
            )
        )
        changed = summary.pop("changed")

        return TransitionResult(
            order_id=summary["order_id"],
            state_changed=changed,
            data={
                "key": reference,
                "orderId": order_id,
                "email": clean_text(data.get("email")),
                "method": clean_text(data.get("method")),
                "amount": clean_text(data.get("amount")),
                "status": summary["status"],
                "message": message,
            },
        )

    def assign_tracking(self, payload) -> TransitionResult:
        """Record tracking and send exactly one shipping notification."""
        data = _request_object(payload)
        order_id = _order_id(data)
        tracking_number = clean_text(data.get("tracking_number"))

        errors = {}
        if order_id is None:
            errors["id"] = ["is required"]
        if not tracking_number:
            errors["tracking_number"] = ["is required"]
        if errors:
            raise ValidationError(errors)

        carrier = clean_text(data.get("carrier"))
        url = tracking_link(carrier, tracking_number, clean_text(data.get("tracking_url")))

        summary = self._commit(
            AssignTracking(
                order_id=order_id,
                tracking_number=tracking_number,
                carrier=carrier,
                tracking_url=url,
            )
        )

        outcome = self._notify(summary["email"], NotificationType.SHIPPING_UPDATE, self._template_context(summary))
        return TransitionResult(
            order_id=summary["order_id"],
            state_changed=True,
            notifications=[outcome],
            data=summary,
        )
