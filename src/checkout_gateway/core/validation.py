"""Helpers for reading and validating JSON request bodies."""

import json
from typing import Any

from fastapi import Request
from pydantic import ValidationError

from checkout_gateway.core.exceptions import RequestValidationFailed


def format_validation_errors(error: ValidationError, skip_locs: tuple[str, ...] = ()) -> list[str]:
    """Human-readable ``field.path: message`` strings from a pydantic error."""
    messages = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"] if part not in skip_locs)
        messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return messages


async def read_json_object(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object; an empty body reads as ``{}``."""
    raw_body = await request.body()
    if not raw_body.strip():
        return {}

    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise RequestValidationFailed(details=[f"body: Invalid JSON: {e}"]) from e

    if not isinstance(payload, dict):
        raise RequestValidationFailed(details=["body: Request body must be a JSON object"])
    return payload
