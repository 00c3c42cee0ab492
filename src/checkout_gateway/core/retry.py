"""Retry-with-backoff executor for outbound calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

BACKOFF_MULTIPLIER = 2


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to attempt a unit of work and how long to wait between attempts."""

    max_attempts: int = 3
    base_delay: float = 1.0  # seconds

    def delay_for(self, attempt: int) -> float:
        """Delay after the zero-based ``attempt`` fails: base, 2*base, 4*base, ..."""
        return self.base_delay * BACKOFF_MULTIPLIER**attempt


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    retry_on: Callable[[Exception], bool] | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Run ``operation`` until it succeeds or the policy's attempts are exhausted.

    Attempts are strictly sequential. Between attempts the executor waits
    ``base_delay * 2**attempt`` (no jitter). Every exception is retried unless
    ``retry_on`` is given and returns False for it, in which case it propagates
    immediately.

    Args:
        operation: Zero-argument coroutine function producing the result
        policy: Attempt count and base delay (defaults to 3 attempts, 1s)
        retry_on: Optional predicate deciding whether a failure is retryable
        sleep: Non-blocking wait, injectable for tests

    Returns:
        The first successful result

    Raises:
        The exception raised by the final attempt
    """
    policy = policy or RetryPolicy()
    if policy.max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {policy.max_attempts}")

    for attempt in range(policy.max_attempts):
        try:
            return await operation()
        except Exception as e:
            if attempt == policy.max_attempts - 1:
                raise
            if retry_on is not None and not retry_on(e):
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                "Attempt %d/%d failed: %s. Retrying in %.1fs...",
                attempt + 1,
                policy.max_attempts,
                str(e),
                delay,
            )
            await sleep(delay)

    # Unreachable: the loop either returns or raises
    raise RuntimeError("retry loop exited without a result")
