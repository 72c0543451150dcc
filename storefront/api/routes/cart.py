from typing import Any, Dict

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_cart_service
from storefront.core.security import get_current_user
from storefront.domain.models.user import CurrentUser
from storefront.domain.schemas.requests import CartAddRequest, CartUpdateRequest
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", summary="List the cart")
def get_cart(
    user: CurrentUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> Dict[str, Any]:
    return service.get_cart(user.id)


@router.post("/add", summary="Add a variation to the cart")
def add_to_cart(
    body: CartAddRequest,
    user: CurrentUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> Dict[str, Any]:
    item = service.add_item(user.id, body.product, body.variation_id, body.quantity)
    return item.to_response()


@router.put("/{item_id}", summary="Change the quantity of a cart line")
def update_cart_item(
    item_id: str,
    body: CartUpdateRequest,
    user: CurrentUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> Dict[str, Any]:
    return service.update_quantity(user.id, item_id, body.quantity).to_response()


@router.delete("/{item_id}", summary="Remove a cart line")
def delete_cart_item(
    item_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
) -> Dict[str, bool]:
    return service.remove_item(user.id, item_id)
