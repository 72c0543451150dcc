import copy
import threading
import time
from typing import Any, Dict, Optional

from storefront.core.logging import get_logger
from storefront.infrastructure.cache.base import CacheStrategy

logger = get_logger(__name__)


class CacheItem:
    """Class representing a cached item with expiration."""

    def __init__(self, value: Any, expires_at: Optional[float] = None):
        self.value = value
        self.expires_at = expires_at

    def is_expired(self) -> bool:
        if self.expires_at is None:
            return False
        return time.time() > self.expires_at


class MemoryCache(CacheStrategy):
    """
    In-memory implementation of the CacheStrategy interface.

    Used when no Redis host is configured. Entries live in the process, so
    each worker keeps its own copy.
    """

    def __init__(self, default_ttl: int = 3600):
        self.default_ttl = default_ttl
        self._cache: Dict[str, CacheItem] = {}
        self._lock = threading.RLock()
        logger.info("In-memory cache initialized")

    def _cleanup_expired(self) -> None:
        """Drop expired items; called on writes."""
        with self._lock:
            expired = [key for key, item in self._cache.items() if item.is_expired()]
            for key in expired:
                del self._cache[key]

            if expired:
                logger.debug(f"Cleaned up {len(expired)} expired cache items")

    async def get(self, key: str) -> Any:
        with self._lock:
            item = self._cache.get(key)
            if item is None:
                return None
            if item.is_expired():
                del self._cache[key]
                return None
            # Callers mutate what they get back; the cached copy must not change
            return copy.deepcopy(item.value)

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        effective_ttl = ttl if ttl is not None else self.default_ttl
        expires_at = time.time() + effective_ttl if effective_ttl > 0 else None

        self._cleanup_expired()
        with self._lock:
            self._cache[key] = CacheItem(copy.deepcopy(value), expires_at)
        return True

    async def delete(self, key: str) -> bool:
        with self._lock:
            return self._cache.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    def health_check(self) -> Dict[str, Any]:
        with self._lock:
            size = len(self._cache)
        return {"status": "ok", "backend": "memory", "items": size}
