"""Client-session creation for the hosted checkout."""

from checkout_gateway.sessions.models import (
    CanonicalOrderPayload,
    NativeSessionRequest,
    SessionRequest,
    SessionRequestAdapter,
    SimplifiedSessionRequest,
)
from checkout_gateway.sessions.normalizer import normalize_session_request

__all__ = [
    "CanonicalOrderPayload",
    "NativeSessionRequest",
    "SessionRequest",
    "SessionRequestAdapter",
    "SimplifiedSessionRequest",
    "normalize_session_request",
]
