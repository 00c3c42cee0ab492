"""
One app per route, for platforms that deploy each endpoint as its own function.

Every function app reuses the same routers, error handlers and CORS setup as
the long-running server in ``checkout_gateway.main``.

Run a single function locally with:
    uvicorn checkout_gateway.entrypoints.functions:webhook_app --port 8004
"""

from fastapi import APIRouter, FastAPI

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.entrypoints.base import (
    configure_logging,
    create_base_app,
    create_health_endpoint,
)
from checkout_gateway.payments.router import router as payments_router
from checkout_gateway.sessions.router import router as sessions_router
from checkout_gateway.webhooks.router import router as webhooks_router


def create_function_app(
    router: APIRouter | None,
    name: str,
    settings: Settings | None = None,
) -> FastAPI:
    """Build a minimal app serving one router; ``router=None`` serves health only."""
    settings = settings or get_settings()
    app = create_base_app(
        settings,
        title=f"Checkout Gateway - {name}",
        description=f"{name} function",
        function_name=name,
    )
    if router is None:
        create_health_endpoint(app)
    else:
        app.include_router(router)
    return app


configure_logging(get_settings())

session_app = create_function_app(sessions_router, "create-client-session")
payments_app = create_function_app(payments_router, "payments")
webhook_app = create_function_app(webhooks_router, "webhook")
health_app = create_function_app(None, "health")
