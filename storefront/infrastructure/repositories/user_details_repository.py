from datetime import datetime, timezone
from typing import Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from storefront.core.exceptions import RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.user import UserDetails
from storefront.infrastructure.repositories.base import MongoRepository

logger = get_logger(__name__)


class UserDetailsRepository(MongoRepository):
    """Repository for user profile details, one document per user."""

    collection_name = "user_details"
    indexes = [{"key": {"user_id": 1}, "name": "user_unique", "unique": True}]

    def get_by_user(self, user_id: str) -> Optional[UserDetails]:
        try:
            document = self.collection.find_one({"user_id": user_id})
        except PyMongoError as e:
            logger.error(f"Failed to retrieve user details for {user_id}: {str(e)}")
            raise RepositoryError(f"Failed to retrieve user details: {str(e)}")
        return UserDetails.model_validate(self._strip_id(document)) if document else None

    def upsert(self, details: UserDetails) -> UserDetails:
        """
        Create or replace the details of ``details.user_id``.

        Raises:
            RepositoryError: If the write fails
        """
        update_data = details.model_dump(exclude={"user_id"})
        update_data["updated_at"] = datetime.now(timezone.utc)

        try:
            document = self.collection.find_one_and_update(
                {"user_id": details.user_id},
                {"$set": update_data},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Failed to save user details for {details.user_id}: {str(e)}")
            raise RepositoryError(f"Failed to save user details: {str(e)}")

        logger.info("Saved user details", extra={"user_id": details.user_id})
        return UserDetails.model_validate(self._strip_id(document))
