from typing import Any, Dict, List, Optional

from storefront.core.exceptions import BadRequestError, DatabaseError, NotFoundError, RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.delivery import Postcode
from storefront.infrastructure.repositories.postcode_repository import PostcodeRepository

logger = get_logger(__name__)


class DeliveryService:
    """Delivery price lookup and maintenance by postcode."""

    def __init__(self, repository: PostcodeRepository):
        self.repository = repository

    def get_prices(self, postcode: str) -> Dict[str, Any]:
        """
        Delivery prices for a postcode.

        Raises:
            NotFoundError: If the postcode is unknown
        """
        normalized = Postcode.normalize(postcode)
        try:
            record = self.repository.get(normalized)
        except RepositoryError as e:
            raise DatabaseError(str(e))
        if record is None:
            raise NotFoundError("Postcode", normalized, detail="Postcode not found")
        return record.model_dump()

    def upsert(self, postcode: Optional[str], economy: Optional[float], premium: Optional[float]) -> Dict[str, str]:
        if not postcode or not postcode.strip() or economy is None or premium is None:
            raise BadRequestError("Missing fields")

        record = Postcode(postcode=Postcode.normalize(postcode), economy_price=economy, premium_price=premium)
        try:
            inserted = self.repository.upsert(record)
        except RepositoryError as e:
            raise DatabaseError(str(e))

        logger.info(f"Postcode {record.postcode} {'inserted' if inserted else 'updated'}")
        return {"message": "Inserted/Updated successfully"}

    def update(self, postcode: str, economy: Optional[float], premium: Optional[float]) -> Dict[str, str]:
        """
        Update the prices of an existing postcode.

        Raises:
            BadRequestError: If a price is missing
            NotFoundError: If the postcode is unknown
        """
        if economy is None or premium is None:
            raise BadRequestError("Missing fields")

        normalized = Postcode.normalize(postcode)
        try:
            updated = self.repository.update_prices(normalized, economy, premium)
        except RepositoryError as e:
            raise DatabaseError(str(e))
        if not updated:
            raise NotFoundError("Postcode", normalized, detail="Postcode not found")
        return {"message": "Updated successfully"}

    def search(self, prefix: str) -> List[Dict[str, Any]]:
        """Postcodes starting with ``prefix`` (case-insensitive), sorted."""
        normalized = Postcode.normalize(prefix)
        try:
            records = self.repository.search_prefix(normalized)
        except RepositoryError as e:
            raise DatabaseError(str(e))
        if not records:
            raise NotFoundError("Postcode", normalized, detail="No records found")
        return [record.model_dump() for record in records]
