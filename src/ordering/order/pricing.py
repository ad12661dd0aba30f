"""Server-side pricing. Client totals are never persisted unchecked."""

from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError

CENT = Decimal("0.01")
MISMATCH_TOLERANCE = Decimal("0.005")

# Inputs above these are rejected before any arithmetic on them.
MAX_AMOUNT = 1_000_000_000
MAX_QUANTITY = 100_000

OVERRIDE = "override"
REJECT = "reject"


def to_decimal(value) -> Decimal:
    return Decimal(str(value))


def round_money(value) -> float:
    return float(to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


def line_total(unit_price, quantity) -> float:
    return round_money(to_decimal(unit_price) * int(quantity))


def compute_total(items) -> float:
    """Sum of ``unit_price * quantity`` over line items, rounded to cents."""
    total = sum(
        (to_decimal(item["unit_price"]) * int(item["quantity"]) for item in items),
        Decimal("0"),
    )
    return round_money(total)


def totals_match(computed, client_total) -> bool:
    return abs(to_decimal(computed) - to_decimal(client_total)) <= MISMATCH_TOLERANCE


def reconcile_total(computed: float, client_total: float | None, policy: str = OVERRIDE) -> tuple[float, bool]:
    """Return ``(total, flagged)`` where ``total`` is always the computed one.

    With the ``reject`` policy a mismatching client total is a validation
    failure instead of a flag.
    """
    if client_total is None or totals_match(computed, client_total):
        return computed, False

    if policy == REJECT:
        raise ValidationError(
            {"total": [f"Submitted total {float(client_total):.2f} does not match computed total {computed:.2f}"]}
        )
    return computed, True
