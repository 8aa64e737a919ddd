import pytest

from vlife.integrations.exercisedb.cache import TTLCache


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_get_returns_value_within_ttl():
    clock = FakeClock()
    cache = TTLCache(max_entries=10, ttl_seconds=3600, clock=clock)

    cache.set("search:bench press", {"name": "Bench Press"})
    clock.advance(3599)

    assert cache.get("search:bench press") == {"name": "Bench Press"}


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TTLCache(max_entries=10, ttl_seconds=3600, clock=clock)

    cache.set("id:0001", {"name": "Squat"})
    clock.advance(3600)

    assert cache.get("id:0001") is None
    assert len(cache) == 0


def test_least_recently_used_entry_is_evicted():
    cache = TTLCache(max_entries=2, ttl_seconds=60, clock=FakeClock())

    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert cache.get("a") == 1
    assert cache.get("b") is None
    assert cache.get("c") == 3


def test_sweep_removes_only_expired_entries():
    clock = FakeClock()
    cache = TTLCache(max_entries=10, ttl_seconds=100, clock=clock)

    cache.set("old-1", 1)
    cache.set("old-2", 2)
    clock.advance(60)
    cache.set("fresh", 3)
    clock.advance(50)

    assert cache.sweep() == 2
    assert len(cache) == 1
    assert cache.get("fresh") == 3


def test_set_refreshes_timestamp():
    clock = FakeClock()
    cache = TTLCache(max_entries=10, ttl_seconds=100, clock=clock)

    cache.set("key", "v1")
    clock.advance(90)
    cache.set("key", "v2")
    clock.advance(90)

    assert cache.get("key") == "v2"


def test_clear():
    cache = TTLCache(max_entries=10, ttl_seconds=100, clock=FakeClock())
    cache.set("key", "value")

    cache.clear()

    assert len(cache) == 0


def test_max_entries_must_be_positive():
    with pytest.raises(ValueError):
        TTLCache(max_entries=0, ttl_seconds=100)
