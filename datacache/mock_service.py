"""In-memory stand-in for a remote posts API.

The service keeps a fixed set of posts and users, waits a random amount of
time before answering to imitate network latency and can fail ``fetch_posts``
with a configurable probability.  It is the slow collaborator that
:class:`~datacache.cached_service.CachedPostService` puts a cache in front of.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, List, Optional, Sequence

from .models import MockServiceConfig, Post, User


_LOGGER = logging.getLogger(__name__)


class DataServiceError(Exception):
    """Base error for the posts data layer."""


class ServiceUnavailableError(DataServiceError):
    """Raised when the posts API drops a request."""


DEFAULT_POSTS: tuple[Post, ...] = (
    Post(id=1, title="Python Concurrency", body="Exploring async/await in Python", user_id=1),
    Post(id=2, title="Protocols and ABCs", body="Building flexible APIs with protocols", user_id=1),
    Post(id=3, title="Pydantic Fundamentals", body="Validating data with type hints", user_id=2),
)

DEFAULT_USERS: tuple[User, ...] = (
    User(id=1, name="John Developer", email="john@dev.com", website="johndev.com"),
    User(id=2, name="Jane Designer", email="jane@design.com"),
)


class MockPostService:
    """Posts API served from memory with simulated latency."""

    def __init__(
        self,
        config: MockServiceConfig | None = None,
        *,
        posts: Sequence[Post] = DEFAULT_POSTS,
        users: Sequence[User] = DEFAULT_USERS,
        rng: random.Random | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config or MockServiceConfig()
        self._posts = list(posts)
        self._users = list(users)
        self._rng = rng or random.Random()
        self._sleep = sleep

    async def _simulate_network_delay(self) -> None:
        delay = self._rng.uniform(self._config.min_delay_sec, self._config.max_delay_sec)
        await self._sleep(delay)

    async def fetch_posts(self) -> List[Post]:
        await self._simulate_network_delay()
        if self._rng.random() < self._config.failure_rate:
            _LOGGER.warning("posts_fetch_failed reason=connection_lost")
            raise ServiceUnavailableError("Network connection lost")
        return list(self._posts)

    async def fetch_user(self, user_id: int) -> Optional[User]:
        await self._simulate_network_delay()
        return next((user for user in self._users if user.id == user_id), None)

    async def create_post(self, title: str, body: str, user_id: int) -> Post:
        """Build the post the API would create; it is not added to the store."""

        await self._simulate_network_delay()
        new_id = max((post.id for post in self._posts), default=0) + 1
        return Post(id=new_id, title=title, body=body, user_id=user_id)


__all__ = [
    "DEFAULT_POSTS",
    "DEFAULT_USERS",
    "DataServiceError",
    "MockPostService",
    "ServiceUnavailableError",
]
