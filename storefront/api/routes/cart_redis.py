from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_redis_cart_service
from storefront.core.security import get_current_user
from storefront.domain.models.user import CurrentUser
from storefront.domain.schemas.requests import CartAddRequest
from storefront.services.cart_service import RedisCartService

router = APIRouter(prefix="/cart/redis", tags=["Cart"])


@router.get("", summary="Cached cart")
async def get_cached_cart(
    user: CurrentUser = Depends(get_current_user),
    service: RedisCartService = Depends(get_redis_cart_service),
) -> List[Dict[str, Any]]:
    return await service.get_cart(user.id)


@router.post("/add", summary="Add to the cached cart")
async def add_to_cached_cart(
    body: CartAddRequest,
    user: CurrentUser = Depends(get_current_user),
    service: RedisCartService = Depends(get_redis_cart_service),
) -> Dict[str, Any]:
    return await service.add_item(user.id, body.product, body.variation_id, body.quantity)


@router.delete("/clear", summary="Clear the cached cart")
async def clear_cached_cart(
    user: CurrentUser = Depends(get_current_user),
    service: RedisCartService = Depends(get_redis_cart_service),
) -> Dict[str, bool]:
    return await service.clear(user.id)
