"""Validation of raw order submissions.

All problems are collected first and reported together as one
``ValidationError`` keyed by field name, so the client can highlight every
missing field at once.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError

from ordering.order.address import (
    BILLING,
    SHIPPING,
    clean_text,
    has_billing_address,
    missing_fields,
    normalize_address,
    snake_keys,
)
from ordering.order.instructions import normalize_method
from ordering.order.pricing import MAX_AMOUNT, MAX_QUANTITY, line_total

REQUIRED = "is required"


@dataclass(frozen=True)
class OrderSubmission:
    email: str
    name: str | None
    phone: str | None
    shipping_address: dict
    billing_address: dict
    items: list[dict]
    payment_method: str
    client_total: float | None = None


def _number(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, int | float):
            number = float(value)
        elif isinstance(value, str) and value.strip():
            number = float(Decimal(value.strip().lstrip("$")))
        else:
            return None
    except (InvalidOperation, ValueError, OverflowError):
        # sNaN, huge ints and unparsable strings
        return None
    if not math.isfinite(number):
        return None
    return number


def _quantity(value) -> int | None:
    number = _number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _items_list(raw) -> list:
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict):
        return list(raw.values())
    return []


def _parse_item(index: int, raw, errors: dict) -> dict | None:
    prefix = f"items[{index}]"
    if not isinstance(raw, dict):
        errors[prefix] = ["must be an object"]
        return None

    item = snake_keys(raw)
    name = clean_text(item.get("name")) or clean_text(item.get("title"))
    if name is None:
        errors[f"{prefix}.name"] = [REQUIRED]

    if item.get("price") is not None:
        price = _number(item["price"])
    elif item.get("unit_price") is not None:
        price = _number(item["unit_price"])
    elif item.get("price_cents") is not None:
        cents = _number(item["price_cents"])
        price = None if cents is None else cents / 100
    else:
        price = None
        errors[f"{prefix}.price"] = [REQUIRED]

    if price is None:
        errors.setdefault(f"{prefix}.price", ["must be a number"])
    elif price < 0:
        errors[f"{prefix}.price"] = ["cannot be negative"]
    elif price > MAX_AMOUNT:
        errors[f"{prefix}.price"] = [f"cannot exceed {MAX_AMOUNT}"]

    raw_quantity = item.get("qty") if item.get("qty") is not None else item.get("quantity")
    quantity = 1 if raw_quantity is None else _quantity(raw_quantity)
    if quantity is None or quantity < 1:
        errors[f"{prefix}.qty"] = ["must be a whole number of at least 1"]
    elif quantity > MAX_QUANTITY:
        errors[f"{prefix}.qty"] = [f"cannot exceed {MAX_QUANTITY}"]

    if any(key == prefix or key.startswith(f"{prefix}.") for key in errors):
        return None

    return {
        "name": name,
        "sku": clean_text(item.get("sku")),
        "size": clean_text(item.get("size")),
        "unit_price": price,
        "quantity": quantity,
        "line_total": line_total(price, quantity),
    }


def _client_total(data: dict, errors: dict) -> float | None:
    for key in ("total", "subtotal"):
        if data.get(key) is not None:
            value = _number(data[key])
            if value is None:
                errors[key] = ["must be a number"]
            return value

    if data.get("subtotal_cents") is not None:
        cents = _number(data["subtotal_cents"])
        if cents is None:
            errors["subtotal_cents"] = ["must be a number"]
            return None
        return cents / 100
    return None


def parse_submission(payload, default_country: str | None = "US") -> OrderSubmission:
    """Validate and normalize an order submission.

    Raises:
        ValidationError: with one entry per failing field, e.g.
            ``{"email": ["is required"], "items": [...]}``.
    """
    if not isinstance(payload, dict):
        raise ValidationError({"body": ["Expected a JSON object"]})

    data = snake_keys(payload)
    errors: dict[str, list[str]] = {}

    email = clean_text(data.get("email"))
    if email is None:
        errors["email"] = [REQUIRED]
    elif "@" not in email:
        errors["email"] = ["is not a valid email address"]

    shipping = normalize_address(data, SHIPPING, default_country=default_country)
    for field in missing_fields(shipping):
        errors[f"shipping_address.{field}"] = [REQUIRED]

    if has_billing_address(data):
        billing = normalize_address(data, BILLING, default_country=shipping["country"])
        for field in missing_fields(billing):
            errors[f"billing_address.{field}"] = [REQUIRED]
    else:
        billing = dict(shipping)

    raw_items = _items_list(data.get("items"))
    items = []
    if not raw_items:
        errors["items"] = ["At least one line item is required"]
    for index, raw in enumerate(raw_items):
        item = _parse_item(index, raw, errors)
        if item is not None:
            items.append(item)

    method = normalize_method(clean_text(data.get("payment_method")))
    if not method:
        errors["payment_method"] = [REQUIRED]

    client_total = _client_total(data, errors)

    if errors:
        raise ValidationError(errors)

    return OrderSubmission(
        email=email,
        name=clean_text(data.get("name")),
        phone=clean_text(data.get("phone")),
        shipping_address=shipping,
        billing_address=billing,
        items=items,
        payment_method=method,
        client_total=client_total,
    )
