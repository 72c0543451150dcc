from datetime import datetime, timezone
from typing import Optional

from pymongo.errors import PyMongoError

from storefront.core.exceptions import RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.upload import UploadedFile
from storefront.infrastructure.repositories.base import MongoRepository

logger = get_logger(__name__)


class UploadRepository(MongoRepository):
    """Repository for uploaded file records."""

    collection_name = "uploads"
    indexes = [{"key": {"id": 1}, "name": "id_unique", "unique": True}]

    def create(self, uploaded: UploadedFile) -> UploadedFile:
        document = uploaded.model_dump()
        document["id"] = uploaded.id or self.new_id()
        document["created_at"] = uploaded.created_at or datetime.now(timezone.utc)

        try:
            self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Failed to record upload {uploaded.name}: {str(e)}")
            raise RepositoryError(f"Failed to record upload: {str(e)}")

        return UploadedFile.model_validate(self._strip_id(document))

    def get_by_id(self, file_id: str) -> Optional[UploadedFile]:
        try:
            document = self.collection.find_one({"id": file_id})
        except PyMongoError as e:
            logger.error(f"Failed to retrieve upload {file_id}: {str(e)}")
            raise RepositoryError(f"Failed to retrieve upload: {str(e)}")
        return UploadedFile.model_validate(self._strip_id(document)) if document else None
