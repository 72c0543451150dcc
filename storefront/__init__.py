"""
Storefront - CMS-backed catalogue, cart and delivery API.

This package serves the storefront REST API (categories with faceted filters,
carts, user details, uploads and delivery prices) together with the gateway
the server-rendered storefront talks to.
"""

__version__ = "0.1.0"
