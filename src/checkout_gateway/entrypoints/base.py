"""Shared lifespan, error handling and health endpoints for every deployment adapter."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.core.base_models import HealthResponse, error_response
from checkout_gateway.core.exceptions import (
    CheckoutGatewayError,
    ConfigurationError,
    RequestValidationFailed,
    UpstreamError,
)
from checkout_gateway.processor.client import ProcessorClient
from checkout_gateway.webhooks.dispatcher import WebhookDispatcher

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def warn_on_insecure_webhooks(settings: Settings) -> None:
    """Make unverified webhook handling loud at startup rather than per request."""
    if not settings.verify_webhooks:
        logger.warning(
            "VERIFY_WEBHOOKS=false - webhook signatures are NOT checked. "
            "NEVER disable in production!"
        )
    elif not settings.primer_webhook_secret:
        logger.warning(
            "PRIMER_WEBHOOK_SECRET is not set - every webhook will be trusted. "
            "Set it before deploying to production!"
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.

    - Open a shared processor client and build the webhook dispatcher on startup
    - Close the processor client on shutdown
    """
    settings: Settings = app.state.settings
    name = getattr(app.state, "function_name", "checkout gateway")

    # Startup
    logger.info("Starting %s (environment=%s)...", name, settings.environment)
    logger.info("Processor API key configured: %s", settings.api_key_configured)
    logger.info("Webhook secret configured: %s", bool(settings.primer_webhook_secret))
    warn_on_insecure_webhooks(settings)

    processor_client = ProcessorClient(settings)
    app.state.processor_client = processor_client
    app.state.webhook_dispatcher = WebhookDispatcher()
    logger.info("%s started successfully", name)

    yield

    # Shutdown
    logger.info("Shutting down %s...", name)
    await processor_client.close()
    app.state.processor_client = None
    logger.info("%s shutdown complete", name)


def add_cors(app: FastAPI, settings: Settings) -> None:
    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )


def add_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        client = request.client.host if request.client else "-"
        logger.info("%s %s - %s", request.method, request.url.path, client)
        return await call_next(request)


def install_exception_handlers(app: FastAPI) -> None:
    """Render every error as JSON with at least an ``error`` field."""

    @app.exception_handler(RequestValidationFailed)
    async def handle_validation_failed(request: Request, exc: RequestValidationFailed):
        return error_response(400, exc.message, details=exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        return error_response(400, "Invalid request data", details=details)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("Configuration error: %s", exc.message)
        return error_response(500, exc.message)

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        settings: Settings = request.app.state.settings
        return error_response(
            exc.status_code,
            exc.message,
            debug=None if settings.is_production else exc.detail or None,
        )

    @app.exception_handler(CheckoutGatewayError)
    async def handle_gateway_error(request: Request, exc: CheckoutGatewayError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse(
                status_code=404,
                content={"error": "Not found", "path": request.url.path, "method": request.method},
            )
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("Unhandled error: %s", str(exc), exc_info=True)
        settings: Settings = request.app.state.settings
        message = "Internal server error" if settings.is_production else str(exc)
        return error_response(500, message)


def create_health_endpoint(app: FastAPI) -> None:
    """Add health check and service info endpoints to the app."""

    @app.get("/health", response_model=HealthResponse)
    async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
        """Health check endpoint for container orchestration."""
        return HealthResponse(environment=settings.environment, version=settings.app_version)

    @app.get("/")
    async def root(settings: Settings = Depends(get_settings)):
        """Root endpoint with API information."""
        return {
            "service": "Checkout Gateway",
            "version": settings.app_version,
            "endpoints": {
                "health": "/health",
                "create_client_session": "/create-client-session",
                "charge_payment_method": "/charge-payment-method",
                "payment_status": "/payments/{id}",
                "webhook": "/webhook",
            },
        }


def create_base_app(
    settings: Settings,
    title: str,
    description: str,
    function_name: str | None = None,
) -> FastAPI:
    """App with settings, error handlers, request logging and CORS but no routes."""
    app = FastAPI(
        title=title,
        description=description,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.function_name = function_name or title
    app.dependency_overrides[get_settings] = lambda: settings

    install_exception_handlers(app)
    add_request_logging(app)
    add_cors(app, settings)
    return app
