"""Pydantic response schemas for the Ordering API.

These are external contracts, separate from the internal Protean commands.
Request bodies are read raw so camelCase keys and address aliases can be
normalized before validation.
"""

from pydantic import BaseModel, Field


class NotificationSchema(BaseModel):
    recipient: str
    template: str
    status: str
    message_id: str | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderCreatedResponse(BaseModel):
    id: str
    order_code: str
    created_at: str | None = None
    status: str
    total: float
    total_flagged: bool = False
    payment_instructions: str
    notifications: list[NotificationSchema] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "0f8fad5b-d9cb-469f-a165-70867728950e",
                    "order_code": "QX1234567",
                    "created_at": "2026-01-05T16:20:00+00:00",
                    "status": "pending",
                    "total": 24.98,
                    "total_flagged": False,
                    "payment_instructions": "Send $24.98 via Cash App to $OrderDesk. Put QX1234567 in the note.",
                    "notifications": [
                        {"recipient": "ada@example.com", "template": "ORDER_RECEIVED", "status": "sent"}
                    ],
                }
            ]
        }
    }


class MarkPaidResponse(BaseModel):
    ok: bool = True
    id: str
    status: str
    changed: bool


class ProofResponse(BaseModel):
    ok: bool = True
    key: str
    orderId: str
    email: str | None = None
    method: str | None = None
    amount: str | None = None
    status: str
    message: str


class TrackingResponse(BaseModel):
    ok: bool = True
    id: str
    status: str
    tracking_url: str | None = None
    notifications: list[NotificationSchema] = Field(default_factory=list)
