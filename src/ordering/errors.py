"""Failure kinds raised by the order flow that Protean does not already model.

Field validation uses ``protean.exceptions.ValidationError`` and missing
orders surface as ``protean.exceptions.ObjectNotFoundError``.
"""


class OrderFlowError(Exception):
    """Base class for order-flow failures."""

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context


class MalformedRequestError(OrderFlowError):
    """The request body could not be parsed as a JSON object."""

    def __init__(self, message: str = "Malformed request body", **context):
        super().__init__(message, **context)


class UnauthorizedError(OrderFlowError):
    def __init__(self, message: str = "Unauthorized", **context):
        super().__init__(message, **context)


class InvalidTransitionError(OrderFlowError):
    """The order's current status does not allow the requested change."""

    def __init__(self, current_status: str, target_status: str):
        super().__init__(
            f"Cannot transition from {current_status} to {target_status}",
            current_status=current_status,
            target_status=target_status,
        )
        self.current_status = current_status
        self.target_status = target_status


class OrderCodeConflictError(OrderFlowError):
    """Every attempt to mint an unused order code collided."""

    def __init__(self, attempts: int):
        super().__init__("Could not allocate a unique order code", attempts=attempts)
        self.attempts = attempts


class UpstreamServiceError(OrderFlowError):
    """A vendor call (datastore, email API, blob store) failed.

    ``details`` must already be free of credentials.
    """

    def __init__(self, service: str, message: str, details=None, status_code: int = 502):
        super().__init__(message, service=service)
        self.service = service
        self.details = details
        self.status_code = status_code
