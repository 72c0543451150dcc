from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_category_service
from storefront.domain.models.catalog import Category
from storefront.services.catalog_filters import FilterCriteria
from storefront.services.category_service import CategoryService

router = APIRouter(tags=["Catalog"])


@router.get("/categories", summary="List categories")
def list_categories(service: CategoryService = Depends(get_category_service)) -> List[Dict[str, Any]]:
    """Categories for navigation, distinct and sorted by name."""
    return service.list_categories()


@router.post("/categories", summary="Create or update a category")
def save_category(category: Category, service: CategoryService = Depends(get_category_service)) -> Dict[str, Any]:
    saved = service.save_category(category)
    return saved.model_dump(mode="json", by_alias=True)


@router.get("/category/{slug}", summary="Category page with filtered products and facet counts")
def get_category_page(
    slug: str,
    price: Optional[str] = Query(None, description="Price range 'min-max'"),
    colorTone: Optional[str] = Query(None),
    finish: Optional[str] = Query(None),
    thickness: Optional[str] = Query(None),
    size: Optional[str] = Query(None),
    pcs: Optional[str] = Query(None),
    packSize: Optional[str] = Query(None),
    offset: int = Query(0),
    limit: Optional[int] = Query(None),
    service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    criteria = FilterCriteria.from_query(
        price=price,
        color_tone=colorTone,
        finish=finish,
        thickness=thickness,
        size=size,
        pcs=pcs,
        pack_size=packSize,
    )
    return service.get_category_page(slug, criteria, offset=offset, limit=limit)
