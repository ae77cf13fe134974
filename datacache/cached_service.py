"""Posts service that puts TTL caches in front of the posts API."""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Tuple

from .cache import TTLCache
from .mock_service import DataServiceError
from .models import DataCacheConfig, Post, PostSummary, User
from .retry import fetch_with_retry


_LOGGER = logging.getLogger(__name__)

POSTS_CACHE_KEY = "posts"


class UserNotFoundError(DataServiceError):
    """Raised when the posts API has no user with the requested id."""


class PostSource(Protocol):
    async def fetch_posts(self) -> List[Post]: ...

    async def fetch_user(self, user_id: int) -> Optional[User]: ...


class CachedPostService:
    """Entry point for cached reads of posts and their authors."""

    def __init__(self, source: PostSource, config: DataCacheConfig | None = None) -> None:
        self._config = config or DataCacheConfig()
        self._source = source
        cache_config = self._config.cache
        # Posts are stored as a tuple so a caller's list never aliases the cache
        self._posts_cache = TTLCache[str, Tuple[Post, ...]](
            cache_config.ttl_sec, copy_values=cache_config.copy_values
        )
        self._user_cache = TTLCache[int, User](
            cache_config.ttl_sec, copy_values=cache_config.copy_values
        )

    async def fetch_posts(self, use_cache: bool = True) -> List[Post]:
        if use_cache:
            cached = await self._posts_cache.get(POSTS_CACHE_KEY)
            if cached is not None:
                _LOGGER.info("posts_cache_hit count=%d", len(cached))
                return list(cached)

        _LOGGER.info(
            "posts_fetch use_cache=%s ttl_sec=%s", use_cache, self._posts_cache.ttl
        )
        retry = self._config.retry
        posts = await fetch_with_retry(
            self._source.fetch_posts,
            max_attempts=retry.max_attempts,
            delay=retry.delay_sec,
        )
        await self._posts_cache.set(POSTS_CACHE_KEY, tuple(posts))
        return list(posts)

    async def fetch_user(self, user_id: int) -> User:
        cached = await self._user_cache.get(user_id)
        if cached is not None:
            return cached

        user = await self._source.fetch_user(user_id)
        if user is None:
            raise UserNotFoundError(f"Unknown user: {user_id}")
        await self._user_cache.set(user_id, user)
        return user

    async def post_summaries(self) -> List[PostSummary]:
        """Join every post with its author, resolving authors concurrently.

        Posts whose author cannot be found or fetched are left out of the
        result.
        """

        posts = await self.fetch_posts()
        summaries = await asyncio.gather(*(self._summarize(post) for post in posts))
        return sorted(
            (summary for summary in summaries if summary is not None),
            key=lambda summary: summary.id,
        )

    async def _summarize(self, post: Post) -> Optional[PostSummary]:
        try:
            author = await self.fetch_user(post.user_id)
        except DataServiceError as exc:
            _LOGGER.warning(
                "summary_skipped post_id=%d user_id=%d error=%s", post.id, post.user_id, exc
            )
            return None
        return PostSummary(
            id=post.id,
            title=post.title,
            author_name=author.name,
            word_count=len(post.body.split()),
        )

    async def invalidate(self) -> None:
        await self._posts_cache.clear()
        await self._user_cache.clear()


__all__ = ["CachedPostService", "POSTS_CACHE_KEY", "PostSource", "UserNotFoundError"]
