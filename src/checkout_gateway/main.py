"""FastAPI application entry point for the long-running checkout gateway server."""

from fastapi import FastAPI

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.entrypoints.base import (
    configure_logging,
    create_base_app,
    create_health_endpoint,
)
from checkout_gateway.payments.router import router as payments_router
from checkout_gateway.sessions.router import router as sessions_router
from checkout_gateway.webhooks.router import router as webhooks_router


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the server app with every route mounted."""
    settings = settings or get_settings()
    app = create_base_app(
        settings,
        title="Checkout Gateway",
        description="Client sessions, stored-token charges and webhooks for the hosted checkout",
    )
    create_health_endpoint(app)
    app.include_router(sessions_router, tags=["sessions"])
    app.include_router(payments_router, tags=["payments"])
    app.include_router(webhooks_router, tags=["webhooks"])
    return app


configure_logging(get_settings())

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "checkout_gateway.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=get_settings().log_level.lower(),
    )
