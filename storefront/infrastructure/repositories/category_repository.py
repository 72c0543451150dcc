from datetime import datetime, timezone
from typing import List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from storefront.core.exceptions import RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.catalog import Category
from storefront.infrastructure.repositories.base import MongoRepository

logger = get_logger(__name__)


class CategoryRepository(MongoRepository):
    """Repository for product categories."""

    collection_name = "categories"
    indexes = [
        {"key": {"slug": 1}, "name": "slug_unique", "unique": True},
        {"key": {"name": 1}, "name": "name_index"},
    ]

    def list_all(self) -> List[Category]:
        """
        List every category sorted by name.

        Raises:
            RepositoryError: If listing fails
        """
        try:
            cursor = self.collection.find({}).sort("name", ASCENDING)
            return [Category.model_validate(self._strip_id(doc)) for doc in cursor]
        except PyMongoError as e:
            logger.error(f"Failed to list categories: {str(e)}")
            raise RepositoryError(f"Failed to list categories: {str(e)}")

    def get_by_slug(self, slug: str) -> Optional[Category]:
        """
        Retrieve a category by slug.

        Returns:
            The category, or None when it does not exist
        """
        try:
            document = self.collection.find_one({"slug": slug})
        except PyMongoError as e:
            logger.error(f"Failed to retrieve category {slug}: {str(e)}")
            raise RepositoryError(f"Failed to retrieve category: {str(e)}")

        if not document:
            logger.info(f"Category not found: {slug}")
            return None
        return Category.model_validate(self._strip_id(document))

    def upsert(self, category: Category) -> Category:
        """
        Create the category or replace the one with the same slug.

        Raises:
            RepositoryError: If the write fails
        """
        document = category.model_dump(exclude={"id"})
        now = datetime.now(timezone.utc)
        document["updated_at"] = now
        try:
            stored = self.collection.find_one_and_update(
                {"slug": category.slug},
                {"$set": document, "$setOnInsert": {"id": self.new_id(), "created_at": now}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Failed to save category {category.slug}: {str(e)}")
            raise RepositoryError(f"Failed to save category: {str(e)}")

        logger.info(f"Saved category {category.slug}")
        return Category.model_validate(self._strip_id(stored))
