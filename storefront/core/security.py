"""
Bearer token authentication.

Tokens are HS256 JWTs carrying the user id in ``sub`` (or ``id``), plus
optional ``username`` and ``email`` claims.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from storefront.core.config import Settings, get_settings
from storefront.core.exceptions import AuthenticationError
from storefront.core.logging import get_logger, set_user_id
from storefront.domain.models.user import CurrentUser

logger = get_logger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)


def create_access_token(
    user_id: str,
    username: Optional[str] = None,
    email: Optional[str] = None,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Mint a signed access token for a user."""
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims: Dict[str, Any] = {"sub": str(user_id), "exp": expire}
    if username:
        claims["username"] = username
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> CurrentUser:
    """
    Validate a token and return the user it identifies.

    Raises:
        AuthenticationError: If the token is expired, invalid or has no user id
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired", code="token_expired")
    except JWTError as e:
        logger.info(f"Rejected bearer token: {str(e)}")
        raise AuthenticationError("Invalid token", code="invalid_token")

    user_id = payload.get("sub") or payload.get("id")
    if user_id is None or str(user_id) == "":
        raise AuthenticationError("Invalid token payload: missing user id", code="invalid_token")

    return CurrentUser(id=str(user_id), username=payload.get("username"), email=payload.get("email"))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> CurrentUser:
    """
    Dependency resolving the authenticated user from the bearer token.

    Usage:
        @router.get("/protected")
        async def protected_route(user: CurrentUser = Depends(get_current_user)):
            ...
    """
    if not credentials:
        raise AuthenticationError()

    user = decode_access_token(credentials.credentials, settings)
    set_user_id(user.id)
    return user
