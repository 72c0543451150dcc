"""
Application services.

Services hold the storefront's use cases and sit between the HTTP routes and
the MongoDB repositories / cache.
"""
