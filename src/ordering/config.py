"""Runtime settings for the order flow.

Settings are read from the environment once and handed to the lifecycle
service, the email channel and the proof store when they are built.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from protean.exceptions import ConfigurationError

EMAIL_BACKENDS = ("fake", "mailgun")
PROOF_BACKENDS = ("memory", "filesystem")
MISMATCH_POLICIES = ("override", "reject")

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: str | None, default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUTHY


def _optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class MailgunSettings:
    api_key: str | None = None
    domain: str | None = None
    region: str = "us"
    sender: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key and self.domain and self.sender)


@dataclass(frozen=True)
class Settings:
    """Explicit configuration for every order operation."""

    environment: str = "development"
    store_name: str = "OrderDesk"
    cors_origin: str = "*"
    admin_token: str | None = None
    proof_marks_paid: bool = False
    default_country: str | None = "US"
    total_mismatch_policy: str = "override"
    currency: str = "USD"
    support_email: str | None = None
    fulfillment_email: str | None = None
    email_backend: str = "fake"
    mailgun: MailgunSettings = field(default_factory=MailgunSettings)
    proof_backend: str = "memory"
    proof_dir: str = "proofs"

    def __post_init__(self):
        if self.email_backend not in EMAIL_BACKENDS:
            raise ConfigurationError(f"Unknown EMAIL_BACKEND {self.email_backend!r}; expected one of {EMAIL_BACKENDS}")
        if self.proof_backend not in PROOF_BACKENDS:
            raise ConfigurationError(f"Unknown PROOF_BACKEND {self.proof_backend!r}; expected one of {PROOF_BACKENDS}")
        if self.total_mismatch_policy not in MISMATCH_POLICIES:
            raise ConfigurationError(
                f"Unknown TOTAL_MISMATCH_POLICY {self.total_mismatch_policy!r}; expected one of {MISMATCH_POLICIES}"
            )

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        default_country = env.get("DEFAULT_COUNTRY")
        if default_country is None:
            default_country = "US"

        return cls(
            environment=(env.get("PROTEAN_ENV") or "development").lower(),
            store_name=env.get("STORE_NAME") or "OrderDesk",
            cors_origin=env.get("CORS_ORIGIN") or "*",
            admin_token=_optional(env.get("ADMIN_API_TOKEN")) or _optional(env.get("TRACKING_UPDATE_TOKEN")),
            proof_marks_paid=_flag(env.get("PROOF_MARKS_PAID")),
            default_country=_optional(default_country),
            total_mismatch_policy=(env.get("TOTAL_MISMATCH_POLICY") or "override").lower(),
            currency=env.get("STORE_CURRENCY") or "USD",
            support_email=_optional(env.get("SUPPORT_EMAIL")),
            fulfillment_email=_optional(env.get("FULFILLMENT_EMAIL")),
            email_backend=(env.get("EMAIL_BACKEND") or "fake").lower(),
            mailgun=MailgunSettings(
                api_key=_optional(env.get("MAILGUN_API_KEY")),
                domain=_optional(env.get("MAILGUN_DOMAIN")),
                region=(env.get("MAILGUN_REGION") or "us").lower(),
                sender=_optional(env.get("MAILGUN_FROM")),
            ),
            proof_backend=(env.get("PROOF_BACKEND") or "memory").lower(),
            proof_dir=env.get("PROOF_DIR") or "proofs",
        )
