"""
Infrastructure package for the storefront.

Concrete storage and caching backends: the MongoDB client and repositories,
the Redis and in-memory caches and local media storage.
"""
