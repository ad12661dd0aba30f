"""Mailgun email adapter.

Posts form-encoded messages to the Mailgun HTTP API with basic auth
(``api:<key>``). Vendor and transport failures come back as
``status="failed"`` results; the API key is scrubbed from anything returned.
"""

import requests
import structlog

from notifications.channel.email_port import EmailPort

logger = structlog.get_logger(__name__)

API_BASES = {
    "us": "https://api.mailgun.net",
    "eu": "https://api.eu.mailgun.net",
}


class MailgunEmailAdapter(EmailPort):
    def __init__(
        self,
        api_key: str,
        domain: str,
        sender: str,
        region: str = "us",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.domain = domain
        self.sender = sender
        self.region = region.lower()
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        base = API_BASES.get(self.region, API_BASES["us"])
        return f"{base}/v3/{self.domain}/messages"

    def _scrub(self, value):
        if isinstance(value, str):
            return value.replace(self.api_key, "***") if self.api_key else value
        if isinstance(value, dict):
            return {key: self._scrub(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._scrub(item) for item in value]
        return value

    @staticmethod
    def _response_body(response):
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError:
                return response.text
        return response.text

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
        data = {"from": self.sender, "to": to, "subject": subject}
        if cc:
            data["cc"] = cc
        if bcc:
            data["bcc"] = bcc
        if reply_to:
            data["h:Reply-To"] = reply_to
        if body:
            data["text"] = body
        if html_body:
            data["html"] = html_body

        try:
            response = self.session.post(
                self.url,
                auth=("api", self.api_key),
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("mailgun.request_failed", error_type=type(exc).__name__)
            return {
                "message_id": None,
                "status": "failed",
                "error": "Request failed",
                "details": self._scrub(str(exc)),
            }

        details = self._scrub(self._response_body(response))
        if not response.ok:
            logger.warning("mailgun.rejected", status_code=response.status_code)
            return {
                "message_id": None,
                "status": "failed",
                "error": "Mailgun error",
                "status_code": response.status_code,
                "details": details,
            }

        message_id = details.get("id") if isinstance(details, dict) else None
        return {"message_id": message_id, "status": "sent", "details": details}
