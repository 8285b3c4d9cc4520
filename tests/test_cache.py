import json

import pytest

from academy.utils.cache import CacheService


class FakeRedis:
    """Minimal in-memory stand-in for the redis client methods the cache uses"""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value

    def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


@pytest.fixture
def cache():
    service = CacheService(url="")
    service.redis_client = FakeRedis()
    return service


def test_empty_url_disables_cache():
    service = CacheService(url="")
    assert service.redis_client is None
    assert service.get("profile:1") is None
    assert service.set("profile:1", {"a": 1}) is False
    assert service.read_through("profile:1", lambda: {"a": 1}) == {"a": 1}


def test_unreachable_redis_disables_cache():
    service = CacheService(url="redis://127.0.0.1:1/0")
    assert service.redis_client is None


def test_read_through_loads_once(cache):
    calls = []

    def loader():
        calls.append(1)
        return {"total_xp": 100}

    assert cache.read_through("profile:u1", loader) == {"total_xp": 100}
    assert cache.read_through("profile:u1", loader) == {"total_xp": 100}
    assert len(calls) == 1
    assert json.loads(cache.redis_client.data["profile:u1"]) == {"total_xp": 100}


def test_none_is_not_cached(cache):
    assert cache.read_through("profile:missing", lambda: None) is None
    assert "profile:missing" not in cache.redis_client.data


def test_invalidate_selected_kinds(cache):
    for kind in ("profile", "progress", "badges"):
        cache.set(cache.key(kind, "u1"), {"kind": kind})

    cache.invalidate("u1", "profile")
    assert cache.get("profile:u1") is None
    assert cache.get("progress:u1") == {"kind": "progress"}

    cache.invalidate("u1")
    assert cache.redis_client.data == {}


def test_completion_invalidates_cached_profile(store, cache, monkeypatch):
    from academy.services import profile_service as profile_module
    from academy.services import progression_service as progression_module

    from conftest import make_learner, seed_course

    monkeypatch.setattr(profile_module, "cache_service", cache)
    monkeypatch.setattr(progression_module, "cache_service", cache)

    seeded = seed_course(store)
    profile = make_learner(store)
    assert profile_module.profile_service.profile_view(store, profile.id)["total_xp"] == 0

    progression_module.progression_service.complete_lesson(store, profile, seeded["video"].id)
    assert profile_module.profile_service.profile_view(store, profile.id)["total_xp"] == 100
