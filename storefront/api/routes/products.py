from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_product_service
from storefront.domain.models.catalog import Product
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Catalog"])


@router.get("/{slug}", summary="Get a product by slug or id")
def get_product(slug: str, service: ProductService = Depends(get_product_service)) -> Dict[str, Any]:
    return service.get_product(slug).model_dump(mode="json", by_alias=True)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a product")
def create_product(product: Product, service: ProductService = Depends(get_product_service)) -> Dict[str, Any]:
    """Variations without a uuid are given one."""
    return service.create_product(product).model_dump(mode="json", by_alias=True)


@router.put("/{slug}", summary="Replace a product")
def update_product(
    slug: str,
    product: Product,
    service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    return service.update_product(slug, product).model_dump(mode="json", by_alias=True)
