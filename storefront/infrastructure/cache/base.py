from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional


class CacheStrategy(ABC):
    """
    Abstract base interface for caching strategies.

    Values are JSON-compatible structures (dicts, lists, scalars). Keys are
    plain strings; implementations add their own namespace prefix.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Retrieves a cached item by key.

        Args:
            key: The key of the item to retrieve

        Returns:
            The cached value if found, None otherwise
        """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Stores an item in the cache.

        Args:
            key: The key to store the value under
            value: The value to store
            ttl: Optional time-to-live in seconds

        Returns:
            bool: True if successfully cached
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Removes an item from the cache.

        Returns:
            bool: True if the key existed
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Checks whether a key is present and not expired."""

    @abstractmethod
    def health_check(self) -> Dict[str, Any]:
        """Report backend reachability."""

    async def get_or_set(
        self,
        key: str,
        value_func: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None
    ) -> Any:
        """
        Return the cached value, computing and caching it on a miss.

        Args:
            key: Cache key
            value_func: Coroutine function producing the value on a miss
            ttl: Optional time-to-live in seconds
        """
        cached = await self.get(key)
        if cached is not None:
            return cached

        value = await value_func()
        await self.set(key, value, ttl)
        return value
