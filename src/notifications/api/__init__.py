"""Email API package."""

from notifications.api.routes import router as email_router

__all__ = ["email_router"]
