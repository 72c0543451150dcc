"""
Domain package for the storefront.

Catalogue, cart, profile and delivery records as plain pydantic models. The
domain layer is persistence-agnostic; repositories map documents to and from
these models and services hold the business rules.
"""
