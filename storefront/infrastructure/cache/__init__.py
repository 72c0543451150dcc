from storefront.infrastructure.cache.base import CacheStrategy
from storefront.infrastructure.cache.memory_cache import MemoryCache
from storefront.infrastructure.cache.redis_cache import RedisCache

__all__ = ["CacheStrategy", "MemoryCache", "RedisCache"]
