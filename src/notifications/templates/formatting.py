"""Small helpers shared by the email templates."""

from html import escape


def money(amount, currency: str = "USD") -> str:
    if amount is None:
        return f"{currency} 0.00"
    return f"{currency} {float(amount):.2f}"


def item_lines(items: list[dict], currency: str = "USD") -> list[str]:
    lines = []
    for item in items or []:
        label = item.get("name", "Item")
        if item.get("size"):
            label = f"{label} ({item['size']})"
        lines.append(f"{item.get('quantity', 1)} x {label} @ {money(item.get('unit_price'), currency)}")
    return lines


def address_lines(address: dict | None) -> list[str]:
    if not address:
        return []
    locality = " ".join(
        part for part in (address.get("city"), address.get("state"), address.get("postal_code")) if part
    )
    return [
        line
        for line in (address.get("line1"), address.get("line2"), locality, address.get("country"))
        if line
    ]


def paragraphs_to_html(text: str) -> str:
    """Escape plain text and wrap each blank-line separated block in <p>."""
    blocks = [block for block in text.split("\n\n") if block.strip()]
    return "".join(f"<p>{escape(block).replace(chr(10), '<br>')}</p>" for block in blocks)
