import math
from typing import Any, Dict

from storefront.services.catalog_filters import DIMENSIONS


def empty_filter_groups() -> Dict[str, Dict[str, int]]:
    return {dimension: {} for dimension in DIMENSIONS}


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def build_pagination(page: int, total_products: int, page_size: int) -> Dict[str, Any]:
    """
    Pagination block of a category page.

    Pages after the first are marked ``noindex`` so that search engines only
    index the first page of a category.
    """
    return {
        "page": page,
        "totalPages": math.ceil(total_products / page_size) if total_products > 0 else 0,
        "limit": page_size,
        "noindex": page > 1,
    }
