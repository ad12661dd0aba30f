import pytest
from notifications.channel.fake_email import FakeEmailAdapter
from ordering.config import MailgunSettings, Settings


@pytest.fixture()
def email():
    return FakeEmailAdapter()


@pytest.fixture()
def mailgun_settings():
    return Settings(
        email_backend="mailgun",
        mailgun=MailgunSettings(
            api_key="key-sekrit-123",
            domain="mg.example.com",
            sender="Shop <orders@mg.example.com>",
        ),
    )
