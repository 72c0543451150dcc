from datetime import datetime, timezone
from typing import List, Optional

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from storefront.core.exceptions import EntityNotFoundError, RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.catalog import Product
from storefront.infrastructure.repositories.base import MongoRepository

logger = get_logger(__name__)


class ProductRepository(MongoRepository):
    """
    Repository for catalogue products.

    Variations are embedded in the product document, so loading a category's
    products is a single query.
    """

    collection_name = "products"
    indexes = [
        {"key": {"id": 1}, "name": "id_unique", "unique": True},
        {"key": {"slug": 1}, "name": "slug_unique", "unique": True},
        {"key": {"category_slugs": 1, "created_at": 1}, "name": "category_products"},
        {"key": {"variations.uuid": 1}, "name": "variation_uuid"},
    ]

    def _load(self, query: dict) -> Optional[Product]:
        try:
            document = self.collection.find_one(query)
        except PyMongoError as e:
            logger.error(f"Failed to retrieve product {query}: {str(e)}")
            raise RepositoryError(f"Failed to retrieve product: {str(e)}")
        if not document:
            return None
        return Product.model_validate(self._strip_id(document))

    def get_by_id(self, product_id: str) -> Optional[Product]:
        return self._load({"id": product_id})

    def get_by_slug(self, slug: str) -> Optional[Product]:
        return self._load({"slug": slug})

    def get(self, id_or_slug: str) -> Optional[Product]:
        """Retrieve a product by id, falling back to its slug."""
        return self._load({"$or": [{"id": id_or_slug}, {"slug": id_or_slug}]})

    def list_by_category(self, category_slug: str) -> List[Product]:
        """
        List the products of a category in creation order.

        Raises:
            RepositoryError: If listing fails
        """
        try:
            cursor = self.collection.find({"category_slugs": category_slug}).sort(
                [("created_at", ASCENDING), ("name", ASCENDING)]
            )
            products = [Product.model_validate(self._strip_id(doc)) for doc in cursor]
        except PyMongoError as e:
            logger.error(f"Failed to list products for category {category_slug}: {str(e)}")
            raise RepositoryError(f"Failed to list products: {str(e)}")

        logger.debug(f"Loaded {len(products)} products for category {category_slug}")
        return products

    def create(self, product: Product) -> Product:
        """
        Insert a new product.

        Raises:
            RepositoryError: If the slug is taken or the insert fails
        """
        now = datetime.now(timezone.utc)
        document = product.model_dump()
        document["id"] = product.id or self.new_id()
        document["created_at"] = product.created_at or now
        document["updated_at"] = now

        try:
            self.collection.insert_one(document)
        except DuplicateKeyError:
            logger.warning(f"Duplicate product slug: {product.slug}")
            raise RepositoryError(f"Product slug already exists: {product.slug}")
        except PyMongoError as e:
            logger.error(f"Failed to create product {product.slug}: {str(e)}")
            raise RepositoryError(f"Failed to create product: {str(e)}")

        logger.info(f"Created product {product.slug}", extra={"product_id": document["id"]})
        return Product.model_validate(self._strip_id(document))

    def update(self, slug: str, product: Product) -> Product:
        """
        Replace the stored fields of the product with the given slug.

        Raises:
            EntityNotFoundError: If no product has that slug
            RepositoryError: If the update fails
        """
        update_data = product.model_dump(exclude={"id", "created_at"})
        update_data["updated_at"] = datetime.now(timezone.utc)

        try:
            result = self.collection.update_one({"slug": slug}, {"$set": update_data})
        except PyMongoError as e:
            logger.error(f"Failed to update product {slug}: {str(e)}")
            raise RepositoryError(f"Failed to update product: {str(e)}")

        if result.matched_count == 0:
            raise EntityNotFoundError(f"Product not found: {slug}")

        logger.info(f"Updated product {slug}")
        return self.get_by_slug(product.slug)
