import asyncio

import pytest

from datacache.cache import TTLCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def test_get_missing_key_returns_none(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, int](10, clock=clock)
        return await cache.get("never-set")

    assert asyncio.run(scenario()) is None


def test_expired_entry_is_absent(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, int](10, clock=clock)
        await cache.set("a", 1)
        clock.advance(10.001)
        return await cache.get("a")

    assert asyncio.run(scenario()) is None


@pytest.mark.parametrize("age", [0.0, 5.0, 10.0])
def test_fresh_entry_is_returned(clock: FakeClock, age: float) -> None:
    async def scenario():
        cache = TTLCache[str, int](10, clock=clock)
        await cache.set("a", 42)
        clock.advance(age)
        return await cache.get("a")

    assert asyncio.run(scenario()) == 42


def test_overwrite_resets_clock(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, str](10, clock=clock)
        await cache.set("a", "first")
        clock.advance(5)
        await cache.set("a", "second")
        clock.advance(6)
        return await cache.get("a")

    assert asyncio.run(scenario()) == "second"


def test_count_includes_stale_entries_until_read(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, int](10, clock=clock)
        for index, key in enumerate(("a", "b", "c")):
            await cache.set(key, index)
        clock.advance(11)
        before = await cache.count()
        value = await cache.get("b")
        after = await cache.count()
        return before, value, after

    before, value, after = asyncio.run(scenario())
    assert before == 3
    assert value is None
    assert after == 2


def test_clear_drops_everything(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, int](10, clock=clock)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.clear()
        return await cache.count(), await cache.get("a"), await cache.get("b")

    assert asyncio.run(scenario()) == (0, None, None)


def test_concrete_scenario(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, int](0.1, clock=clock)
        await cache.set("a", 1)
        clock.advance(0.05)
        fresh = await cache.get("a")
        clock.advance(0.1)
        stale = await cache.get("a")
        return fresh, stale, await cache.count()

    assert asyncio.run(scenario()) == (1, None, 0)


@pytest.mark.parametrize("ttl", [0, -1])
def test_non_positive_ttl_makes_entries_stale_immediately(clock: FakeClock, ttl: float) -> None:
    async def scenario():
        cache = TTLCache[str, int](ttl, clock=clock)
        await cache.set("a", 1)
        stored = await cache.count()
        return stored, await cache.get("a"), await cache.count()

    assert asyncio.run(scenario()) == (1, None, 0)


def test_returned_values_are_copies(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, list](10, clock=clock)
        original = [1, 2]
        await cache.set("a", original)
        original.append(3)
        first = await cache.get("a")
        first.append(99)
        return await cache.get("a")

    assert asyncio.run(scenario()) == [1, 2]


def test_copying_can_be_disabled(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, list](10, clock=clock, copy_values=False)
        value = [1]
        await cache.set("a", value)
        return value, await cache.get("a")

    value, cached = asyncio.run(scenario())
    assert cached is value


def test_concurrent_writers_leave_one_value(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, dict](10, clock=clock)
        first = {"writer": 1, "payload": list(range(100))}
        second = {"writer": 2, "payload": list(range(100, 200))}
        await asyncio.gather(cache.set("x", first), cache.set("x", second))
        return await cache.get("x"), await cache.count(), first, second

    value, count, first, second = asyncio.run(scenario())
    assert value in (first, second)
    assert count == 1


def test_concurrent_mixed_operations_stay_consistent(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[int, int](10, clock=clock)
        await asyncio.gather(*(cache.set(key, key * 2) for key in range(50)))
        values = await asyncio.gather(*(cache.get(key) for key in range(50)))
        return values, await cache.count()

    values, count = asyncio.run(scenario())
    assert values == [key * 2 for key in range(50)]
    assert count == 50


def test_concurrent_operations_see_earlier_effects(clock: FakeClock) -> None:
    async def scenario():
        cache = TTLCache[str, int](10, clock=clock)
        return await asyncio.gather(
            cache.set("a", 1),
            cache.get("a"),
            cache.set("a", 2),
            cache.get("a"),
            cache.count(),
            cache.clear(),
            cache.count(),
            cache.get("a"),
        )

    assert asyncio.run(scenario()) == [None, 1, None, 2, 1, None, 0, None]


def test_ttl_is_exposed(clock: FakeClock) -> None:
    assert TTLCache[str, int](2.5, clock=clock).ttl == 2.5


def test_default_clock_expires_real_time() -> None:
    async def scenario():
        cache = TTLCache[str, int](0.05)
        await cache.set("a", 1)
        fresh = await cache.get("a")
        await asyncio.sleep(0.1)
        return fresh, await cache.get("a")

    assert asyncio.run(scenario()) == (1, None)
