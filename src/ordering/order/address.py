"""Address normalization for order submissions.

Storefronts send the shipping address either as flat top-level fields
(``address_line1``, ``ship_country``...) or nested under ``address``.
camelCase and snake_case keys are treated the same. Flat fields win over
nested ones, and only the canonical six-key dict is kept.
"""

import re

ADDRESS_FIELDS = ("line1", "line2", "city", "state", "postal_code", "country")
REQUIRED_ADDRESS_FIELDS = ("line1", "city", "state", "postal_code", "country")

SHIPPING = "shipping"
BILLING = "billing"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

_FLAT_ALIASES = {
    SHIPPING: {
        "line1": ("address_line1", "ship_address_line1", "ship_line1", "ship_address1", "shipping_line1"),
        "line2": ("address_line2", "ship_address_line2", "ship_line2", "ship_address2", "shipping_line2"),
        "city": ("city", "ship_city", "shipping_city"),
        "state": ("state", "ship_state", "shipping_state"),
        "postal_code": (
            "postal_code",
            "zip",
            "zip_code",
            "ship_postal_code",
            "ship_postal",
            "ship_zip",
            "shipping_postal_code",
        ),
        "country": ("country", "ship_country", "shipping_country"),
    },
    BILLING: {
        "line1": ("billing_address_line1", "billing_line1", "bill_line1"),
        "line2": ("billing_address_line2", "billing_line2", "bill_line2"),
        "city": ("billing_city", "bill_city"),
        "state": ("billing_state", "bill_state"),
        "postal_code": ("billing_postal_code", "billing_zip", "bill_postal_code", "bill_zip"),
        "country": ("billing_country", "bill_country"),
    },
}

_NESTED_ALIASES = {
    "line1": ("line1", "address_line1", "address1", "street"),
    "line2": ("line2", "address_line2", "address2"),
    "city": ("city",),
    "state": ("state", "province", "region"),
    "postal_code": ("postal_code", "zip", "zip_code", "postcode"),
    "country": ("country", "country_code"),
}

_NESTED_KEYS = {
    SHIPPING: ("address", "shipping_address", "shipping"),
    BILLING: ("billing_address", "billing"),
}


def snake_case(key: str) -> str:
    """``postalCode`` → ``postal_code``; snake_case keys pass through."""
    return _CAMEL_BOUNDARY.sub("_", str(key)).lower()


def snake_keys(mapping) -> dict:
    if not isinstance(mapping, dict):
        return {}
    return {snake_case(key): value for key, value in mapping.items()}


def clean_text(value) -> str | None:
    """Strip strings, stringify numbers, and collapse blanks to None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _first(mapping: dict, keys) -> str | None:
    for key in keys:
        value = clean_text(mapping.get(key))
        if value is not None:
            return value
    return None


def _nested(payload: dict, kind: str) -> dict:
    for key in _NESTED_KEYS[kind]:
        value = payload.get(key)
        if isinstance(value, dict):
            return snake_keys(value)
    return {}


def normalize_address(payload: dict, kind: str = SHIPPING, default_country: str | None = None) -> dict:
    """Build the canonical address dict for ``kind`` from a raw submission.

    ``payload`` keys are expected in snake_case already (see ``snake_keys``).
    Missing fields come back as None, except ``country`` which falls back to
    ``default_country``.
    """
    flat_aliases = _FLAT_ALIASES[kind]
    nested = _nested(payload, kind)

    address = {}
    for field in ADDRESS_FIELDS:
        value = _first(payload, flat_aliases[field])
        if value is None:
            value = _first(nested, _NESTED_ALIASES[field])
        address[field] = value

    if address["country"] is None and default_country:
        address["country"] = default_country
    return address


def has_billing_address(payload: dict) -> bool:
    """True when the submission carries its own billing address."""
    return normalize_address(payload, BILLING)["line1"] is not None


def missing_fields(address: dict) -> list[str]:
    return [field for field in REQUIRED_ADDRESS_FIELDS if not address.get(field)]
