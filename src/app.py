"""OrderDesk FastAPI application.

Processes order commands synchronously over HTTP. Every request runs inside
the ordering domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay in ordering/domain.toml.
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notifications.api import email_router
from ordering.api import order_router
from ordering.api.errors import register_error_handlers
from ordering.config import Settings
from ordering.domain import ordering
from ordering.order.lifecycle import OrderLifecycle

ordering.init()

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None, lifecycle: OrderLifecycle | None = None) -> FastAPI:
    """Assemble the API around one settings object and one lifecycle service."""
    settings = settings or Settings.from_env()
    lifecycle = lifecycle or OrderLifecycle.from_settings(settings)

    app = FastAPI(
        title="OrderDesk API",
        description="Order intake, manual payment confirmation, proof uploads and shipping updates",
    )
    app.state.settings = settings
    app.state.lifecycle = lifecycle
    app.state.email_channel = lifecycle.email

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin.strip() for origin in settings.cors_origin.split(",")],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the ordering domain context for each request."""
        with ordering.domain_context():
            response = await call_next(request)
        return response

    register_error_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(order_router)
    app.include_router(email_router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": ordering.name,
                "environment": settings.environment,
                "email_backend": settings.email_backend,
                "proof_backend": settings.proof_backend,
            }
        )

    logger.info(
        "app.created",
        environment=settings.environment,
        email_backend=settings.email_backend,
        proof_backend=settings.proof_backend,
    )
    return app


app = create_app()
