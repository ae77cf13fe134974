"""Retry helper for fetches that run on a cache miss."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar


T = TypeVar("T")

_LOGGER = logging.getLogger(__name__)


async def fetch_with_retry(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    delay: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await ``operation`` until it succeeds or ``max_attempts`` are used up.

    The last exception is re-raised once every attempt has failed.
    """

    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:  # noqa: BLE001 - any failure counts as an attempt
            _LOGGER.warning(
                "fetch_attempt_failed attempt=%d max_attempts=%d error=%s",
                attempt,
                max_attempts,
                exc,
            )
            if attempt == max_attempts:
                raise
            await sleep(delay)
    raise AssertionError("unreachable")
