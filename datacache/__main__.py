"""Application entry point for running with ``python -m datacache``.

Runs the cached fetch walkthrough against the in-memory posts API: the first
request goes to the API, the second is served from the cache and the third
bypasses it.  Set ``DATACACHE_NO_POOL_BENCH=1`` to skip the object pool
timing at the end.
"""
from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import List

from .cached_service import CachedPostService
from .config import load_config
from .mock_service import MockPostService
from .models import DataCacheConfig
from .pool import ObjectPool


_LOGGER = logging.getLogger("datacache")


def _strtobool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


class _Buffer:
    """Object that is costly to build and cheap to reuse."""

    def __init__(self) -> None:
        self.data: List[int] = list(range(1, 1001))

    def reset(self) -> None:
        self.data[0] = 1


async def _run_cache_demo(config: DataCacheConfig) -> None:
    service = CachedPostService(MockPostService(config.service), config)

    first = await service.fetch_posts()
    print(f"First request: {len(first)} posts")
    second = await service.fetch_posts()
    print(f"Second request: {len(second)} posts")
    third = await service.fetch_posts(use_cache=False)
    print(f"Third request (no cache): {len(third)} posts")

    for summary in await service.post_summaries():
        print(f"  - {summary.title} by {summary.author_name} ({summary.word_count} words)")


def _run_pool_bench(config: DataCacheConfig, rounds: int = 100) -> None:
    pool = ObjectPool(_Buffer, _Buffer.reset, initial_size=config.pool.initial_size)

    started = time.perf_counter()
    for _ in range(rounds):
        len(_Buffer().data)
    without_pool = time.perf_counter() - started

    started = time.perf_counter()
    for _ in range(rounds):
        buffer = pool.acquire()
        len(buffer.data)
        pool.release(buffer)
    with_pool = time.perf_counter() - started

    print(f"Without object pool: {without_pool:.4f}s")
    print(f"With object pool: {with_pool:.4f}s")


def main() -> None:
    """Load configuration, set up logging and run the walkthrough."""

    config = load_config()
    logging.basicConfig(
        level=config.logging.level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    _LOGGER.info("config_loaded ttl_sec=%s", config.cache.ttl_sec)

    asyncio.run(_run_cache_demo(config))
    if not _strtobool(os.getenv("DATACACHE_NO_POOL_BENCH")):
        _run_pool_bench(config)


if __name__ == "__main__":
    main()
