"""Domain and configuration models for the data cache service."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Post(BaseModel):
    """Post returned by the posts API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(..., ge=1, description="Post identifier")
    title: str = Field(..., description="Post title")
    body: str = Field(..., description="Post text")
    user_id: int = Field(..., alias="userId", description="Author identifier")

    def __str__(self) -> str:
        return f"Post {self.id}: {self.title}"


class User(BaseModel):
    """Author of posts."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1)
    name: str
    email: str
    website: Optional[str] = Field(None, description="Personal site, if any")

    def __str__(self) -> str:
        return f"{self.name} ({self.email})"


class PostSummary(BaseModel):
    """Post joined with its author's name and a word count of the body."""

    id: int
    title: str
    author_name: str
    word_count: int = Field(..., ge=0)


class CacheConfig(BaseModel):
    """Settings of the posts/users cache."""

    ttl_sec: float = Field(30.0, ge=0, description="Время жизни записи в секундах")
    copy_values: bool = Field(
        True, description="Return copies of cached values instead of shared objects"
    )


class MockServiceConfig(BaseModel):
    """Behaviour of the in-memory posts API."""

    min_delay_sec: float = Field(0.1, ge=0)
    max_delay_sec: float = Field(0.5, ge=0)
    failure_rate: float = Field(
        0.0, ge=0.0, le=1.0, description="Probability that fetch_posts fails"
    )

    @model_validator(mode="after")
    def _check_delay_range(self) -> "MockServiceConfig":
        if self.max_delay_sec < self.min_delay_sec:
            raise ValueError("max_delay_sec must not be lower than min_delay_sec")
        return self


class RetryConfig(BaseModel):
    """Retry policy for fetches issued on a cache miss."""

    max_attempts: int = Field(3, ge=1)
    delay_sec: float = Field(1.0, ge=0)


class PoolConfig(BaseModel):
    initial_size: int = Field(5, ge=0)


class LoggingConfig(BaseModel):
    level: str = Field("INFO", description="Имя уровня модуля logging")


class DataCacheConfig(BaseModel):
    """Вся конфигурация проекта."""

    cache: CacheConfig = Field(default_factory=CacheConfig)
    service: MockServiceConfig = Field(default_factory=MockServiceConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    pool: PoolConfig = Field(default_factory=PoolConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
