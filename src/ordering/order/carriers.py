"""Carrier tracking links."""

from urllib.parse import quote

TRACKING_URL_TEMPLATES = {
    "usps": "https://tools.usps.com/go/TrackConfirmAction?tLabels={number}",
    "ups": "https://www.ups.com/track?tracknum={number}",
    "fedex": "https://www.fedex.com/fedextrack/?trknbr={number}",
    "dhl": "https://www.dhl.com/en/express/tracking.html?AWB={number}",
}


def tracking_link(carrier: str | None, tracking_number: str, explicit_url: str | None = None) -> str | None:
    """Prefer the URL the operator supplied; otherwise derive one from the carrier."""
    if explicit_url:
        return explicit_url
    if not carrier:
        return None
    template = TRACKING_URL_TEMPLATES.get(carrier.strip().lower().replace(" ", ""))
    if template is None:
        return None
    return template.format(number=quote(tracking_number, safe=""))
