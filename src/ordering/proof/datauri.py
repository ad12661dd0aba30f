"""Decoding of inline proof images and derivation of their storage keys."""

import base64
import binascii
import re

from protean.exceptions import ValidationError

DEFAULT_MIME = "image/png"

_DATA_URI = re.compile(r"^data:(image/[\w+.-]+);base64,(.+)$", re.DOTALL)
_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


def _lenient_b64decode(payload: str) -> bytes:
    """Decode base64 the forgiving way browsers do: skip junk, fix padding."""
    cleaned = _NON_BASE64.sub("", payload.replace("-", "+").replace("_", "/"))
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned)
    except (binascii.Error, ValueError):
        return b""


def decode_data_uri(value: str) -> tuple[str, bytes]:
    """Split ``data:image/<type>;base64,<payload>`` into MIME type and bytes.

    Anything without a recognizable tag is treated as bare base64 of a PNG.
    """
    match = _DATA_URI.match(value.strip())
    if match:
        return match.group(1).lower(), _lenient_b64decode(match.group(2))
    return DEFAULT_MIME, _lenient_b64decode(value)


def sanitize_identifier(order_id) -> str:
    return _UNSAFE_ID_CHARS.sub("", str(order_id or ""))


def extension_for(mime: str) -> str:
    subtype = mime.split("/", 1)[1] if "/" in mime else ""
    subtype = subtype.split("+", 1)[0]
    subtype = re.sub(r"[^a-z0-9]", "", subtype.lower())
    return {"jpeg": "jpg"}.get(subtype, subtype) or "png"


def proof_key(order_id, timestamp_ms: int, mime: str) -> str:
    """``<sanitized order id>-<epoch millis>.<ext>``; same inputs give the same key."""
    safe_id = sanitize_identifier(order_id)
    if not safe_id:
        raise ValidationError({"orderId": ["must contain letters, digits, '-' or '_'"]})
    return f"{safe_id}-{int(timestamp_ms)}.{extension_for(mime)}"
