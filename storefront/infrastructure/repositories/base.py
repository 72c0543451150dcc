from typing import Any, Dict, List, Optional
import uuid

from pymongo.collection import Collection

from storefront.infrastructure.database.mongodb.client import MongoDBClient


class MongoRepository:
    """
    Shared plumbing for the MongoDB repositories.

    Documents carry their own string ``id`` (a UUID4 hex) with a unique
    index; MongoDB's ``_id`` never leaves the repository.
    """

    collection_name: str = ""
    indexes: List[Dict[str, Any]] = []

    def __init__(self, db_client: MongoDBClient):
        """
        Initialize the repository.

        Args:
            db_client: MongoDB client instance
        """
        self.db_client = db_client

    @property
    def collection(self) -> Collection:
        """The backing collection, with its declared indexes ensured on the shared client."""
        self.db_client.ensure_indexes(self.collection_name, self.indexes)
        return self.db_client.get_collection(self.collection_name)

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def _strip_id(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if document is None:
            return None
        document = dict(document)
        document.pop("_id", None)
        return document
