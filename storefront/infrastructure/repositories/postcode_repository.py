import re
from typing import Iterable, List, Optional

from pymongo import ASCENDING, UpdateOne
from pymongo.errors import PyMongoError

from storefront.core.exceptions import RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.delivery import Postcode
from storefront.infrastructure.repositories.base import MongoRepository

logger = get_logger(__name__)


class PostcodeRepository(MongoRepository):
    """
    Repository for delivery prices keyed by postcode.

    Postcodes are passed in already normalized (trimmed, upper-case).
    """

    collection_name = "postcodes"
    indexes = [{"key": {"postcode": 1}, "name": "postcode_unique", "unique": True}]

    def get(self, postcode: str) -> Optional[Postcode]:
        try:
            document = self.collection.find_one({"postcode": postcode})
        except PyMongoError as e:
            logger.error(f"Failed to retrieve postcode {postcode}: {str(e)}")
            raise RepositoryError(f"Failed to retrieve postcode: {str(e)}")
        return Postcode.model_validate(self._strip_id(document)) if document else None

    def upsert(self, postcode: Postcode) -> bool:
        """
        Insert or replace the prices of a postcode.

        Returns:
            True if a new postcode was inserted
        """
        try:
            result = self.collection.update_one(
                {"postcode": postcode.postcode},
                {"$set": postcode.model_dump()},
                upsert=True,
            )
        except PyMongoError as e:
            logger.error(f"Failed to upsert postcode {postcode.postcode}: {str(e)}")
            raise RepositoryError(f"Failed to upsert postcode: {str(e)}")
        return result.upserted_id is not None

    def update_prices(self, postcode: str, economy_price: float, premium_price: float) -> bool:
        """
        Update the prices of an existing postcode.

        Returns:
            False when the postcode does not exist
        """
        try:
            result = self.collection.update_one(
                {"postcode": postcode},
                {"$set": {"economy_price": economy_price, "premium_price": premium_price}},
            )
        except PyMongoError as e:
            logger.error(f"Failed to update postcode {postcode}: {str(e)}")
            raise RepositoryError(f"Failed to update postcode: {str(e)}")
        return result.matched_count > 0

    def search_prefix(self, prefix: str) -> List[Postcode]:
        """List postcodes starting with ``prefix``, sorted ascending."""
        query = {"postcode": {"$regex": f"^{re.escape(prefix)}"}}
        try:
            cursor = self.collection.find(query).sort("postcode", ASCENDING)
            return [Postcode.model_validate(self._strip_id(doc)) for doc in cursor]
        except PyMongoError as e:
            logger.error(f"Failed to search postcodes with prefix {prefix}: {str(e)}")
            raise RepositoryError(f"Failed to search postcodes: {str(e)}")

    def bulk_upsert(self, postcodes: Iterable[Postcode]) -> int:
        """
        Upsert many postcodes in one round trip.

        Returns:
            Number of postcodes inserted or modified
        """
        operations = [
            UpdateOne({"postcode": p.postcode}, {"$set": p.model_dump()}, upsert=True)
            for p in postcodes
        ]
        if not operations:
            return 0

        try:
            result = self.collection.bulk_write(operations, ordered=False)
        except PyMongoError as e:
            logger.error(f"Bulk postcode upsert failed: {str(e)}")
            raise RepositoryError(f"Bulk postcode upsert failed: {str(e)}")

        written = result.upserted_count + result.modified_count
        logger.info(f"Bulk upserted {len(operations)} postcodes", extra={"written": written})
        return written
