"""Order and idempotency identifier generation."""

import secrets
import string
import time

ORDER_ID_PREFIX = "ORD"
IDEMPOTENCY_KEY_PREFIX = "charge"

_BASE36 = string.digits + string.ascii_lowercase


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def generate_order_id() -> str:
    """Return ``ORD-<epoch ms>-<8 uppercase hex>``; uniqueness is probabilistic only."""
    return f"{ORDER_ID_PREFIX}-{_epoch_ms()}-{secrets.token_hex(4).upper()}"


def generate_idempotency_key() -> str:
    """Return a per-call ``charge-<epoch ms>-<13 base36 chars>`` key."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(13))
    return f"{IDEMPOTENCY_KEY_PREFIX}-{_epoch_ms()}-{suffix}"
