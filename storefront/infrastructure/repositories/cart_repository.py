from datetime import datetime, timezone
from typing import List, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from storefront.core.exceptions import EntityNotFoundError, RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.cart import CartItem
from storefront.infrastructure.repositories.base import MongoRepository

logger = get_logger(__name__)


class CartRepository(MongoRepository):
    """Repository for persistent cart items."""

    collection_name = "cart_items"
    indexes = [
        {"key": {"id": 1}, "name": "id_unique", "unique": True},
        {"key": {"user_id": 1, "variation_uuid": 1}, "name": "user_variation"},
        {"key": {"user_id": 1, "created_at": 1}, "name": "user_created"},
    ]

    def list_by_user(self, user_id: str) -> List[CartItem]:
        """
        List the cart items of a user, oldest first.

        Raises:
            RepositoryError: If listing fails
        """
        try:
            cursor = self.collection.find({"user_id": user_id}).sort("created_at", ASCENDING)
            return [CartItem.model_validate(self._strip_id(doc)) for doc in cursor]
        except PyMongoError as e:
            logger.error(f"Failed to list cart items for user {user_id}: {str(e)}")
            raise RepositoryError(f"Failed to list cart items: {str(e)}")

    def get_by_id(self, item_id: str) -> Optional[CartItem]:
        try:
            document = self.collection.find_one({"id": item_id})
        except PyMongoError as e:
            logger.error(f"Failed to retrieve cart item {item_id}: {str(e)}")
            raise RepositoryError(f"Failed to retrieve cart item: {str(e)}")
        return CartItem.model_validate(self._strip_id(document)) if document else None

    def find_by_user_and_variation(self, user_id: str, variation_uuid: str) -> Optional[CartItem]:
        try:
            document = self.collection.find_one({"user_id": user_id, "variation_uuid": variation_uuid})
        except PyMongoError as e:
            logger.error(f"Failed to look up cart item: {str(e)}")
            raise RepositoryError(f"Failed to look up cart item: {str(e)}")
        return CartItem.model_validate(self._strip_id(document)) if document else None

    def create(self, item: CartItem) -> CartItem:
        """
        Insert a new cart item.

        Raises:
            RepositoryError: If the insert fails
        """
        now = datetime.now(timezone.utc)
        document = item.model_dump()
        document["id"] = item.id or self.new_id()
        document["created_at"] = now
        document["updated_at"] = now

        try:
            self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Failed to create cart item: {str(e)}")
            raise RepositoryError(f"Failed to create cart item: {str(e)}")

        logger.info(
            f"Created cart item {document['id']}",
            extra={"user_id": item.user_id, "variation_uuid": item.variation_uuid},
        )
        return CartItem.model_validate(self._strip_id(document))

    def update_quantity(self, item_id: str, quantity: int) -> CartItem:
        """
        Set the quantity of a cart item.

        Raises:
            EntityNotFoundError: If the item does not exist
            RepositoryError: If the update fails
        """
        try:
            document = self.collection.find_one_and_update(
                {"id": item_id},
                {"$set": {"quantity": quantity, "updated_at": datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Failed to update cart item {item_id}: {str(e)}")
            raise RepositoryError(f"Failed to update cart item: {str(e)}")

        if not document:
            raise EntityNotFoundError(f"Cart item not found: {item_id}")
        return CartItem.model_validate(self._strip_id(document))

    def delete(self, item_id: str) -> bool:
        """
        Delete a cart item.

        Returns:
            True if an item was deleted
        """
        try:
            result = self.collection.delete_one({"id": item_id})
        except PyMongoError as e:
            logger.error(f"Failed to delete cart item {item_id}: {str(e)}")
            raise RepositoryError(f"Failed to delete cart item: {str(e)}")

        if result.deleted_count == 0:
            logger.info(f"No cart item deleted: {item_id}")
            return False
        logger.info(f"Deleted cart item {item_id}")
        return True
