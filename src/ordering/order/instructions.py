"""Payment instructions sent with the order confirmation.

A lookup table keyed by payment method, with a default entry for methods
the store does not know about. Output depends only on the method, the
order code and the total.
"""

import re

DEFAULT_METHOD = "default"

PAYMENT_INSTRUCTIONS = {
    "cashapp": (
        "Send ${total} with Cash App. Put your order code {order_code} in the note so we can match your payment."
    ),
    "venmo": (
        "Send ${total} with Venmo. Put your order code {order_code} in the payment note and keep the payment private."
    ),
    "zelle": "Send ${total} with Zelle and use your order code {order_code} as the memo.",
    "bitcoin": (
        "Send the BTC equivalent of ${total} to the wallet address shown at checkout, "
        "then reply with the transaction ID and your order code {order_code}."
    ),
    "paypal": "Send ${total} with PayPal and include your order code {order_code} in the note.",
    DEFAULT_METHOD: (
        "Complete your payment of ${total} with the method you chose at checkout and reference "
        "your order code {order_code}. Reply to this email if you need payment details."
    ),
}

_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_method(method) -> str:
    """``"Cash App"`` and ``"cash_app"`` both become ``"cashapp"``."""
    if method is None:
        return ""
    return _SEPARATORS.sub("", str(method)).lower()


def payment_instructions(method, order_code, total) -> str:
    template = PAYMENT_INSTRUCTIONS.get(normalize_method(method)) or PAYMENT_INSTRUCTIONS[DEFAULT_METHOD]
    return template.format(order_code=order_code, total=f"{float(total):.2f}")
