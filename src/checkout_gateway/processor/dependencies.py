"""FastAPI dependencies for the processor client."""

from collections.abc import AsyncIterator

from fastapi import Depends, Request

from checkout_gateway.config import Settings, get_settings
from checkout_gateway.processor.client import ProcessorClient


async def get_processor_client(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[ProcessorClient]:
    """Shared client created at startup, or a short-lived one when the app has none."""
    client: ProcessorClient | None = getattr(request.app.state, "processor_client", None)
    if client is not None:
        yield client
        return

    async with ProcessorClient(settings) as client:
        yield client
