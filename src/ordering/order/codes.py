"""Human-readable order codes: two letters followed by seven digits.

The generator is swappable so tests can force collisions.
"""

import re
import secrets
import string
from collections.abc import Callable

MAX_CODE_ATTEMPTS = 5
ORDER_CODE_PATTERN = re.compile(r"^[A-Z]{2}\d{7}$")


def generate_order_code() -> str:
    letters = "".join(secrets.choice(string.ascii_uppercase) for _ in range(2))
    digits = "".join(secrets.choice(string.digits) for _ in range(7))
    return f"{letters}{digits}"


_current_generator: Callable[[], str] | None = None


def get_code_generator() -> Callable[[], str]:
    """Return the active order-code generator. Defaults to ``generate_order_code``."""
    return _current_generator or generate_order_code


def set_code_generator(generator: Callable[[], str]) -> None:
    """Override the order-code generator (useful for tests)."""
    global _current_generator
    _current_generator = generator


def reset_code_generator() -> None:
    global _current_generator
    _current_generator = None
