"""Fake email adapter: records sent emails for testing."""

from uuid import uuid4

from notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Email adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.attempts: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

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
        record = {
            "to": to,
            "subject": subject,
            "body": body,
            "html_body": html_body,
            "cc": cc,
            "bcc": bcc,
            "reply_to": reply_to,
        }
        self.attempts.append(record)

        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append({"message_id": message_id, **record})

        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        """Clear sent emails (useful between tests)."""
        self.sent_emails.clear()
        self.attempts.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
