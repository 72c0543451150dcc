import json
import time
from typing import Any, Dict, Optional

import redis
from redis.exceptions import RedisError

from storefront.core.exceptions import CacheError
from storefront.core.logging import get_logger
from storefront.infrastructure.cache.base import CacheStrategy

logger = get_logger(__name__)


class RedisCache(CacheStrategy):
    """Redis-based implementation of the CacheStrategy interface."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: Optional[str] = None,
        db: int = 0,
        prefix: str = "storefront",
        default_ttl: int = 3600,
        client: Optional[redis.Redis] = None,
        serializer=json,
        **kwargs
    ):
        """
        Initialize the Redis cache.

        Args:
            host: Redis host
            port: Redis port
            password: Redis password
            db: Redis database number
            prefix: Key prefix for namespacing
            default_ttl: Default TTL in seconds
            client: Pre-built Redis client, used instead of opening one
            serializer: Object for serializing/deserializing values
            **kwargs: Additional Redis connection options
        """
        self.prefix = prefix
        self.default_ttl = default_ttl
        self.serializer = serializer

        if client is not None:
            self.client = client
            return

        connection_kwargs = {
            "host": host,
            "port": port,
            "db": db,
            **kwargs
        }
        if password:
            connection_kwargs["password"] = password

        self.client = redis.Redis(**connection_kwargs)

    def _build_key(self, key: str) -> str:
        """
        Build a prefixed cache key.

        Args:
            key: Original key

        Returns:
            Prefixed key
        """
        if not self.prefix:
            return key
        return f"{self.prefix}:{key}"

    async def get(self, key: str) -> Any:
        """
        Get item from cache.

        Returns:
            Cached value or None if not found

        Raises:
            CacheError: If there is a Redis error
        """
        prefixed_key = self._build_key(key)

        try:
            value = self.client.get(prefixed_key)
        except RedisError as e:
            logger.error(f"Redis error getting key {prefixed_key}: {str(e)}")
            raise CacheError(f"Redis error getting key {key}: {str(e)}")

        if value is None:
            logger.debug(f"Cache miss for key: {prefixed_key}")
            return None

        try:
            result = self.serializer.loads(value)
        except ValueError as e:
            # A corrupt entry behaves like a miss and is overwritten on the next set
            logger.warning(f"Error deserializing cached value for key {prefixed_key}: {str(e)}")
            return None

        logger.debug(f"Cache hit for key: {prefixed_key}")
        return result

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set item in cache with TTL.

        Raises:
            CacheError: If there is a Redis error or the value is not serializable
        """
        prefixed_key = self._build_key(key)
        effective_ttl = ttl if ttl is not None else self.default_ttl

        try:
            serialized = self.serializer.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Error serializing value for key {prefixed_key}: {str(e)}")
            raise CacheError(f"Error serializing value for key {key}: {str(e)}")

        try:
            result = self.client.setex(prefixed_key, effective_ttl, serialized)
        except RedisError as e:
            logger.error(f"Redis error setting key {prefixed_key}: {str(e)}")
            raise CacheError(f"Redis error setting key {key}: {str(e)}")

        logger.debug(f"Set cache key {prefixed_key} with TTL {effective_ttl}s")
        return bool(result)

    async def delete(self, key: str) -> bool:
        """
        Remove item from cache.

        Returns:
            True if key was found and deleted

        Raises:
            CacheError: If there is a Redis error
        """
        prefixed_key = self._build_key(key)

        try:
            deleted = self.client.delete(prefixed_key) > 0
        except RedisError as e:
            logger.error(f"Redis error deleting key {prefixed_key}: {str(e)}")
            raise CacheError(f"Redis error deleting key {key}: {str(e)}")

        logger.debug(f"Deleted cache key {prefixed_key}: {deleted}")
        return deleted

    async def exists(self, key: str) -> bool:
        """
        Check if key exists in cache.

        Raises:
            CacheError: If there is a Redis error
        """
        prefixed_key = self._build_key(key)

        try:
            return self.client.exists(prefixed_key) > 0
        except RedisError as e:
            logger.error(f"Redis error checking key {prefixed_key}: {str(e)}")
            raise CacheError(f"Redis error checking key {key}: {str(e)}")

    def health_check(self) -> Dict[str, Any]:
        start_time = time.time()
        try:
            self.client.ping()
        except RedisError as e:
            logger.error(f"Redis ping failed: {str(e)}")
            return {"status": "unavailable", "backend": "redis", "error": str(e)}

        return {
            "status": "ok",
            "backend": "redis",
            "response_time_ms": round((time.time() - start_time) * 1000, 2)
        }
