from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_delivery_service
from storefront.domain.schemas.requests import PostcodeUpdateRequest, PostcodeUpsertRequest
from storefront.services.delivery_service import DeliveryService

router = APIRouter(prefix="/delivery", tags=["Delivery"])


@router.get("/search/{prefix}", summary="Search postcodes by prefix")
def search_postcodes(prefix: str, service: DeliveryService = Depends(get_delivery_service)) -> List[Dict[str, Any]]:
    return service.search(prefix)


@router.get("/{postcode}", summary="Delivery prices for a postcode")
def get_delivery_prices(postcode: str, service: DeliveryService = Depends(get_delivery_service)) -> Dict[str, Any]:
    return service.get_prices(postcode)


@router.post("", summary="Insert or update a postcode")
def upsert_postcode(body: PostcodeUpsertRequest, service: DeliveryService = Depends(get_delivery_service)) -> Dict[str, str]:
    return service.upsert(body.postcode, body.economy, body.premium)


@router.put("/{postcode}", summary="Update the prices of a postcode")
def update_postcode(
    postcode: str,
    body: PostcodeUpdateRequest,
    service: DeliveryService = Depends(get_delivery_service),
) -> Dict[str, str]:
    return service.update(postcode, body.economy, body.premium)
