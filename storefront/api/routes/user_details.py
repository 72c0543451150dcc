from typing import Any, Dict

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_user_details_service
from storefront.core.security import get_current_user
from storefront.domain.models.user import CurrentUser
from storefront.domain.schemas.requests import UserDetailsUpdateRequest
from storefront.services.user_details_service import UserDetailsService

router = APIRouter(prefix="/user-details", tags=["User details"])


@router.get("/me", summary="Current user with details")
async def get_me(
    user: CurrentUser = Depends(get_current_user),
    service: UserDetailsService = Depends(get_user_details_service),
) -> Dict[str, Any]:
    return await service.me(user)


@router.get("/redis", summary="Cached user details")
async def get_cached_details(
    user: CurrentUser = Depends(get_current_user),
    service: UserDetailsService = Depends(get_user_details_service),
) -> Dict[str, Any]:
    return await service.get_cached(user.id)


@router.post("", summary="Save user details")
async def save_details(
    body: UserDetailsUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: UserDetailsService = Depends(get_user_details_service),
) -> Dict[str, Any]:
    return await service.update(user.id, body)


@router.delete("/redis/clear", summary="Drop cached user details")
async def clear_cached_details(
    user: CurrentUser = Depends(get_current_user),
    service: UserDetailsService = Depends(get_user_details_service),
) -> Dict[str, bool]:
    return await service.clear_cache(user.id)
