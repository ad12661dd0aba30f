"""Email channel factory.

Builds the adapter selected by ``Settings.email_backend``:
- FakeEmailAdapter for development and testing
- MailgunEmailAdapter for production
"""

from protean.exceptions import ConfigurationError

from notifications.channel.email_port import EmailPort
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.mailgun_email import MailgunEmailAdapter
from ordering.config import Settings


def build_email_channel(settings: Settings) -> EmailPort:
    """Return the configured email adapter."""
    if settings.email_backend == "mailgun":
        mailgun = settings.mailgun
        if not mailgun.is_complete:
            raise ConfigurationError(
                "Server misconfiguration: missing MAILGUN_API_KEY, MAILGUN_DOMAIN, or MAILGUN_FROM"
            )
        return MailgunEmailAdapter(
            api_key=mailgun.api_key,
            domain=mailgun.domain,
            sender=mailgun.sender,
            region=mailgun.region,
        )
    return FakeEmailAdapter()
