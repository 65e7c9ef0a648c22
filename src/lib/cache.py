"""
Process-wide cache client.

Every backend exposes the same four operations (get, set, delete,
delete_pattern) and never raises: a failing cache is logged and behaves
like a miss so requests fall through to the database.
"""
import fnmatch
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

import redis

from src.config import REDIS_URL

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3600


class CacheBackend(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value or None on miss/failure"""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> bool:
        """Store a JSON-serialisable value for ttl seconds"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove one key"""

    @abstractmethod
    def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern, return the count"""


class RedisCache(CacheBackend):
    def __init__(self, url: str):
        self.url = url
        self._client: Optional[redis.Redis] = None
        self._lock = threading.Lock()

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    try:
                        self._client = redis.Redis.from_url(
                            self.url,
                            decode_responses=True,
                            socket_timeout=2,
                            socket_connect_timeout=2,
                            retry_on_timeout=True,
                            health_check_interval=30,
                        )
                    except ValueError as e:
                        # malformed REDIS_URL, handled by callers as an outage
                        logger.error("Invalid Redis URL %s: %s", self.url, e)
                        raise redis.ConnectionError(str(e)) from e
                    logger.info("Redis client created for %s", self.url)
        return self._client

    def _reset(self):
        # dropped clients are rebuilt on the next call
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            try:
                client.close()
            except redis.RedisError:
                pass

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self.client.get(key)
        except redis.ConnectionError as e:
            logger.warning("Redis unavailable reading %s: %s", key, e)
            self._reset()
            return None
        except redis.RedisError as e:
            logger.warning("Error getting cache key %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> bool:
        try:
            self.client.setex(key, ttl, json.dumps(value))
            return True
        except redis.ConnectionError as e:
            logger.warning("Redis unavailable writing %s: %s", key, e)
            self._reset()
        except (redis.RedisError, TypeError, ValueError) as e:
            logger.warning("Error setting cache key %s: %s", key, e)
        return False

    def delete(self, key: str) -> bool:
        try:
            self.client.delete(key)
            return True
        except redis.ConnectionError as e:
            logger.warning("Redis unavailable deleting %s: %s", key, e)
            self._reset()
        except redis.RedisError as e:
            logger.warning("Error deleting cache key %s: %s", key, e)
        return False

    def delete_pattern(self, pattern: str) -> int:
        try:
            keys = list(self.client.scan_iter(match=pattern, count=100))
            deleted = 0
            for start in range(0, len(keys), 500):
                deleted += self.client.delete(*keys[start : start + 500])
            return deleted
        except redis.ConnectionError as e:
            logger.warning("Redis unavailable deleting pattern %s: %s", pattern, e)
            self._reset()
        except redis.RedisError as e:
            logger.warning("Error deleting cache pattern %s: %s", pattern, e)
        return 0


class MemoryCache(CacheBackend):
    """In-process backend, values stored as JSON text like in Redis"""

    def __init__(self):
        self._store: Dict[str, Tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            expires_at, raw = entry
            if expires_at <= time.monotonic():
                del self._store[key]
                return None
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl: int = DEFAULT_TTL) -> bool:
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.warning("Error setting cache key %s: %s", key, e)
            return False
        with self._lock:
            self._store[key] = (time.monotonic() + ttl, raw)
        return True

    def delete(self, key: str) -> bool:
        with self._lock:
            self._store.pop(key, None)
        return True

    def delete_pattern(self, pattern: str) -> int:
        with self._lock:
            keys = [k for k in self._store if fnmatch.fnmatchcase(k, pattern)]
            for k in keys:
                del self._store[k]
        return len(keys)

    def clear(self):
        with self._lock:
            self._store.clear()


_cache: Optional[CacheBackend] = None
_cache_lock = threading.Lock()


def build_cache(url: str) -> CacheBackend:
    if url.startswith("memory://"):
        return MemoryCache()
    return RedisCache(url)


def get_cache() -> CacheBackend:
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                _cache = build_cache(REDIS_URL)
    return _cache


def set_cache(backend: Optional[CacheBackend]):
    """Swap the process-wide backend (None resets to lazy creation)"""
    global _cache
    with _cache_lock:
        _cache = backend
