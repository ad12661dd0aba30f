"""Email channel port: abstract interface for email dispatch."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email dispatch adapters."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str | None,
        html_body: str | None = None,
        cc: str | None = None,
        bcc: str | None = None,
        reply_to: str | None = None,
    ) -> dict:
        """Send an email message.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"),
            error (optional), details (optional, vendor response without credentials)
        """
        ...
