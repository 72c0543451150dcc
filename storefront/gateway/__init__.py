"""
Backend-for-frontend gateway.

Serves the server-side routes of the storefront front end. Calls are relayed
to the storefront API with the bearer token taken from the auth cookie.
"""
