"""
Redis caching service for seeded generation results
"""
import hashlib
import json
import time
from typing import Any, Dict, List, Optional, Tuple

import redis
import structlog

from quizsmith.config import settings
from quizsmith.models import Question

logger = structlog.get_logger()

GENERATION_PREFIX = "quizsmith:generation:"


class CacheService:
    def __init__(self, redis_url: str = settings.redis_url, max_memory_entries: int = settings.memory_cache_size):
        self._memory_cache: Dict[str, Tuple[float, Any]] = {}
        self.max_memory_entries = max_memory_entries
        try:
            self.redis_client = redis.from_url(redis_url, decode_responses=True, socket_connect_timeout=1)
            self.redis_client.ping()
            logger.info("redis_cache_connected", redis_url=redis_url)
        except Exception as e:
            logger.warning("redis_unavailable_using_memory_cache", error=str(e))
            self.redis_client = None

    def _memory_get(self, key: str) -> Optional[Any]:
        entry = self._memory_cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= time.monotonic():
            del self._memory_cache[key]
            return None
        return value

    def _memory_set(self, key: str, value: Any, expire: int) -> None:
        now = time.monotonic()
        for stale in [k for k, (expires_at, _) in self._memory_cache.items() if expires_at <= now]:
            del self._memory_cache[stale]
        self._memory_cache.pop(key, None)
        while len(self._memory_cache) >= self.max_memory_entries:
            # dicts keep insertion order, so the first key is the oldest entry
            del self._memory_cache[next(iter(self._memory_cache))]
        self._memory_cache[key] = (now + expire, value)

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        try:
            if self.redis_client:
                value = self.redis_client.get(key)
                return json.loads(value) if value else None
            return self._memory_get(key)
        except Exception as e:
            logger.error("cache_get_failed", key=key, error=str(e))
            return None

    def set(self, key: str, value: Any, expire: int = 3600) -> bool:
        """Set value in cache with expiration"""
        try:
            if self.redis_client:
                return bool(self.redis_client.setex(key, expire, json.dumps(value)))
            self._memory_set(key, value, expire)
            return True
        except Exception as e:
            logger.error("cache_set_failed", key=key, error=str(e))
            return False

    def delete(self, key: str) -> bool:
        try:
            if self.redis_client:
                return bool(self.redis_client.delete(key))
            return self._memory_cache.pop(key, None) is not None
        except Exception as e:
            logger.error("cache_delete_failed", key=key, error=str(e))
            return False


# -------------------- GENERATION RESULTS --------------------

def generation_key(text: str, count: int, quiz_type: str, seed: int) -> str:
    digest = hashlib.sha256(f"{quiz_type}|{count}|{seed}|{text}".encode("utf-8")).hexdigest()
    return GENERATION_PREFIX + digest


def get_cached_questions(key: str) -> Optional[List[Question]]:
    payload = cache.get(key)
    if payload is None:
        return None
    return [Question.model_validate(item) for item in payload]


def cache_questions(key: str, questions: List[Question], expire: int = settings.cache_ttl_seconds) -> bool:
    return cache.set(key, [q.model_dump(mode="json") for q in questions], expire=expire)


# Global cache instance
cache = CacheService()
