"""Generic pool of reusable objects."""
from __future__ import annotations

from typing import Callable, Generic, List, TypeVar


T = TypeVar("T")


class ObjectPool(Generic[T]):
    """Hands out idle objects and creates new ones only when the pool is empty.

    ``reset`` runs on every released object before it becomes available again.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        reset: Callable[[T], None],
        *,
        initial_size: int = 0,
    ) -> None:
        if initial_size < 0:
            raise ValueError("initial_size must not be negative")
        self._factory = factory
        self._reset = reset
        self._idle: List[T] = [factory() for _ in range(initial_size)]

    def acquire(self) -> T:
        if self._idle:
            return self._idle.pop()
        return self._factory()

    def release(self, obj: T) -> None:
        self._reset(obj)
        self._idle.append(obj)

    def size(self) -> int:
        """Number of idle objects waiting to be reused."""
        return len(self._idle)


__all__ = ["ObjectPool"]
