from panchang_api.services.cache import TTLCache


class Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_entries_expire_after_ttl():
    clock = Clock()
    cache = TTLCache(max_entries=4, ttl=60, clock=clock)
    cache.put_with_expiry("a", 1)
    clock.now += 59
    assert cache.get("a") == 1
    clock.now += 2
    assert cache.get("a") is None
    assert len(cache) == 0


def test_per_entry_ttl_overrides_default():
    clock = Clock()
    cache = TTLCache(max_entries=4, ttl=3600, clock=clock)
    cache.put_with_expiry("failed", "calc", ttl=300)
    cache.put_with_expiry("scraped", "full")
    clock.now += 301
    assert "failed" not in cache
    assert cache.get("scraped") == "full"


def test_least_recently_used_entry_is_evicted():
    cache = TTLCache(max_entries=2, ttl=60, clock=Clock())
    cache.put_with_expiry("a", 1)
    cache.put_with_expiry("b", 2)
    cache.get("a")
    cache.put_with_expiry("c", 3)
    assert "b" not in cache
    assert cache.get("a") == 1 and cache.get("c") == 3


def test_clear_and_env_defaults(monkeypatch):
    monkeypatch.setenv("PANCHANG_CACHE_MAX_ENTRIES", "3")
    monkeypatch.setenv("PANCHANG_CACHE_TTL_SECONDS", "10")
    cache = TTLCache()
    assert cache.max_entries == 3 and cache.ttl == 10.0
    cache.put_with_expiry("a", 1)
    cache.clear()
    assert len(cache) == 0
