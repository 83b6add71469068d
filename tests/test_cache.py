"""
Tests for the cache service memory fallback
"""
from unittest.mock import patch

import pytest
import redis

from quizsmith.services.cache import CacheService, generation_key


@pytest.fixture
def memory_cache():
    with patch("quizsmith.services.cache.redis.from_url", side_effect=redis.ConnectionError("down")):
        service = CacheService(max_memory_entries=3)
    assert service.redis_client is None
    return service


class TestMemoryCache:
    def test_set_get_delete(self, memory_cache):
        assert memory_cache.set("a", [1, 2])
        assert memory_cache.get("a") == [1, 2]
        assert memory_cache.delete("a")
        assert memory_cache.get("a") is None

    def test_expire_honored(self, memory_cache):
        with patch("quizsmith.services.cache.time.monotonic", return_value=1000.0):
            memory_cache.set("a", "value", expire=10)
            memory_cache.set("b", "value", expire=100)
        with patch("quizsmith.services.cache.time.monotonic", return_value=1011.0):
            assert memory_cache.get("a") is None
            assert memory_cache.get("b") == "value"
            memory_cache.set("c", "value")
        assert set(memory_cache._memory_cache) == {"b", "c"}

    def test_size_bounded(self, memory_cache):
        for key in "abcde":
            memory_cache.set(key, key)
        assert list(memory_cache._memory_cache) == ["c", "d", "e"]
        assert memory_cache.get("a") is None
        assert memory_cache.get("e") == "e"


class TestGenerationKey:
    def test_depends_on_every_input(self):
        base = generation_key("text", 5, "mcq", 1)
        assert base == generation_key("text", 5, "mcq", 1)
        assert base != generation_key("text", 5, "mcq", 2)
        assert base != generation_key("text", 6, "mcq", 1)
        assert base != generation_key("text", 5, "truefalse", 1)
        assert base != generation_key("other", 5, "mcq", 1)
