import uuid
from typing import List

from storefront.core.exceptions import BadRequestError, DatabaseError, NotFoundError
from storefront.core.exceptions import EntityNotFoundError, RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.catalog import Product, Variation
from storefront.infrastructure.repositories.product_repository import ProductRepository

logger = get_logger(__name__)


def assign_variation_uuids(variations: List[Variation]) -> int:
    """
    Give every variation without a uuid a fresh UUID4.

    Returns:
        Number of uuids assigned
    """
    assigned = 0
    for variation in variations:
        if not variation.uuid:
            variation.uuid = str(uuid.uuid4())
            assigned += 1
    return assigned


class ProductService:
    """Manages catalogue products."""

    def __init__(self, product_repository: ProductRepository):
        self.repository = product_repository

    def get_product(self, id_or_slug: str) -> Product:
        try:
            product = self.repository.get(id_or_slug)
        except RepositoryError as e:
            raise DatabaseError(str(e))
        if product is None:
            raise NotFoundError("Product", id_or_slug)
        return product

    def create_product(self, product: Product) -> Product:
        """Store a new product, assigning uuids to its variations."""
        assigned = assign_variation_uuids(product.variations)
        logger.info(f"Creating product {product.slug}", extra={"uuids_assigned": assigned})
        try:
            if self.repository.get_by_slug(product.slug) is not None:
                raise BadRequestError(f"Product slug already exists: {product.slug}", field="slug")
            return self.repository.create(product)
        except RepositoryError as e:
            raise DatabaseError(str(e))

    def update_product(self, slug: str, product: Product) -> Product:
        """Replace a product, keeping existing variation uuids and filling missing ones."""
        assigned = assign_variation_uuids(product.variations)
        logger.info(f"Updating product {slug}", extra={"uuids_assigned": assigned})
        try:
            return self.repository.update(slug, product)
        except EntityNotFoundError:
            raise NotFoundError("Product", slug)
        except RepositoryError as e:
            raise DatabaseError(str(e))
