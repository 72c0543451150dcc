from functools import lru_cache
from typing import Optional

from fastapi import Request

from storefront.core.config import get_settings
from storefront.core.exceptions import AuthenticationError
from storefront.gateway.client import StorefrontAPIClient


@lru_cache()
def get_api_client() -> StorefrontAPIClient:
    settings = get_settings()
    return StorefrontAPIClient(settings.STOREFRONT_API_URL, timeout=settings.GATEWAY_TIMEOUT)


def get_token(request: Request) -> Optional[str]:
    """Auth token from the cookie, None when absent."""
    return request.cookies.get(get_settings().AUTH_COOKIE_NAME) or None


def require_token(request: Request) -> str:
    """
    Auth token from the cookie.

    Raises:
        AuthenticationError: If the cookie is missing
    """
    token = get_token(request)
    if not token:
        raise AuthenticationError("Not authenticated")
    return token
