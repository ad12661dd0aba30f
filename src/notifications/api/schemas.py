"""Pydantic response schemas for the email API."""

from pydantic import BaseModel


class EmailSentResponse(BaseModel):
    ok: bool = True
    result: dict

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "ok": True,
                    "result": {
                        "message_id": "<20260105162000.1.ABC@mg.example.com>",
                        "status": "sent",
                    },
                }
            ]
        }
    }
