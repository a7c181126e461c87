"""
Retry with exponential backoff.

What is retryable is decided by the caller's predicate; this module only
knows how to wait.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    is_retryable: Callable[[BaseException], bool],
    max_attempts: int = 3,
    base_delay: float = 2.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await ``fn()`` up to ``max_attempts`` times.

    Failures rejected by ``is_retryable`` propagate at once. Retryable ones
    wait ``base_delay * 2**attempt`` before the next try, with no wait after
    the final attempt; the last error is re-raised when attempts run out.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(max_attempts):
        try:
            return await fn()
        except Exception as e:
            if not is_retryable(e):
                raise
            if attempt >= max_attempts - 1:
                logger.warning(
                    "Retry attempts exhausted",
                    attempts=max_attempts,
                    error=str(e),
                )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Retryable failure, backing off",
                attempt=attempt + 1,
                max_attempts=max_attempts,
                delay_seconds=delay,
                error=str(e),
            )
            await sleep(delay)

    # Unreachable: the loop either returns or raises.
    raise RuntimeError("retry loop exited without a result")
