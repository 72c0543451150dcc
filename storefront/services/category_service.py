"""
Category service.

Builds the data behind a category landing page: the category content, the
filtered and paginated product listing and the facet counts shown next to it.
"""

from typing import Any, Dict, List, Optional

from storefront.core.exceptions import BadRequestError, DatabaseError, NotFoundError
from storefront.core.exceptions import RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.catalog import Category, Product, Variation
from storefront.infrastructure.repositories.category_repository import CategoryRepository
from storefront.infrastructure.repositories.product_repository import ProductRepository
from storefront.services.catalog_filters import (
    FilterCriteria,
    MatchedProduct,
    compute_filter_counts,
    filter_products,
)

logger = get_logger(__name__)


def effective_discount(product: Product, category: Category) -> float:
    """The larger of the product and category discounts, in percent."""
    return max(product.product_discount or 0, category.category_discount or 0)


def _discounted(value: Optional[float], discount: float) -> Optional[float]:
    if value is None:
        return None
    return round(value * (100 - discount) / 100, 2)


def variation_summary(variation: Variation) -> Dict[str, Any]:
    return {
        "SKU": variation.sku,
        "Thickness": variation.thickness,
        "Size": variation.size,
        "Finish": variation.finish,
        "PackSize": variation.pack_size,
        "Pcs": variation.pcs,
        "Stock": variation.stock,
        "ColorTone": variation.color_tone,
        "Price": variation.price,
        "Per_m2": variation.per_m2,
    }


def listing_entry(matched: MatchedProduct, category: Category) -> Dict[str, Any]:
    """
    Shape one product of the category listing.

    The first matching variation represents the product. When a discount
    applies its prices are reduced and the original ones are reported in
    ``priceBeforeDiscount``.
    """
    product = matched.product
    variation = variation_summary(matched.variations[0])
    discount = effective_discount(product, category)

    price_before_discount = None
    if discount > 0:
        price_before_discount = {"Price": variation["Price"], "Per_m2": variation["Per_m2"]}
        variation["Price"] = _discounted(variation["Price"], discount)
        variation["Per_m2"] = _discounted(variation["Per_m2"], discount)

    return {
        "variation": variation,
        "product": {
            "name": product.name,
            "slug": product.slug,
            "productDiscount": product.product_discount,
            "categoryDiscount": category.category_discount,
            "images": [image.to_response() for image in product.images],
            "createdAt": product.created_at.isoformat() if product.created_at else None,
            "updatedAt": product.updated_at.isoformat() if product.updated_at else None,
        },
        "priceBeforeDiscount": price_before_discount,
    }


class CategoryService:
    """Manages categories and category page assembly."""

    def __init__(
        self,
        category_repository: CategoryRepository,
        product_repository: ProductRepository,
        default_page_size: int = 12,
    ):
        self.categories = category_repository
        self.products = product_repository
        self.default_page_size = default_page_size

    def list_categories(self) -> List[Dict[str, Any]]:
        """Categories for navigation, distinct by slug and sorted by name."""
        try:
            categories = self.categories.list_all()
        except RepositoryError as e:
            raise DatabaseError(str(e))

        seen = set()
        result = []
        for category in sorted(categories, key=lambda c: c.name):
            if category.slug in seen:
                continue
            seen.add(category.slug)
            result.append({
                "name": category.name,
                "slug": category.slug,
                "categoryDiscount": category.category_discount,
                "images": [image.to_response() for image in category.images],
            })
        return result

    def save_category(self, category: Category) -> Category:
        try:
            return self.categories.upsert(category)
        except RepositoryError as e:
            raise DatabaseError(str(e))

    def get_category_page(
        self,
        slug: str,
        criteria: FilterCriteria,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Build a category page.

        Args:
            slug: Category slug
            criteria: Active filters
            offset: Number of matching products to skip
            limit: Page size, ``default_page_size`` when omitted

        Returns:
            Category content with ``totalProducts``, the page of ``products``
            and ``filterCounts``

        Raises:
            BadRequestError: If offset or limit is out of range
            NotFoundError: If the category does not exist
        """
        if limit is None:
            limit = self.default_page_size
        if offset < 0:
            raise BadRequestError("offset must not be negative", field="offset")
        if limit < 1:
            raise BadRequestError("limit must be positive", field="limit")

        try:
            category = self.categories.get_by_slug(slug)
            if category is None:
                raise NotFoundError("Category", slug, detail="Category not found")
            products = self.products.list_by_category(slug)
        except RepositoryError as e:
            raise DatabaseError(str(e))

        matched = filter_products(products, criteria)
        page = matched[offset:offset + limit]

        logger.info(
            f"Category page {slug}: {len(matched)} of {len(products)} products match",
            extra={"filters": {k: str(v) for k, v in criteria.active().items()}, "offset": offset, "limit": limit},
        )

        return {
            "name": category.name,
            "slug": category.slug,
            "categoryDiscount": category.category_discount,
            "short_description": category.short_description,
            "images": [image.to_response() for image in category.images],
            "totalProducts": len(matched),
            "products": [listing_entry(m, category) for m in page],
            "seo": category.seo.model_dump() if category.seo else None,
            "filterCounts": compute_filter_counts(products, criteria),
        }
