"""
Request schemas for the storefront API.

Domain models double as response shapes; the schemas here only describe
request bodies, which are looser than the records they produce.
"""
