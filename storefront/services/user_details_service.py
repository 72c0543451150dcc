from typing import Any, Dict

from storefront.core.exceptions import BadRequestError, DatabaseError, RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.user import (
    CurrentUser,
    PhoneNumber,
    ProfileImage,
    SavedAddress,
    UserDetails,
)
from storefront.domain.schemas.requests import UserDetailsUpdateRequest
from storefront.infrastructure.cache.base import CacheStrategy
from storefront.infrastructure.repositories.upload_repository import UploadRepository
from storefront.infrastructure.repositories.user_details_repository import UserDetailsRepository

logger = get_logger(__name__)


class UserDetailsService:
    """
    Manages user profile details.

    Reads go through the cache (``user-details:user:{user_id}``); writes go to
    MongoDB and invalidate the cached copy.
    """

    def __init__(
        self,
        repository: UserDetailsRepository,
        upload_repository: UploadRepository,
        cache: CacheStrategy,
        ttl: int = 3600,
    ):
        self.repository = repository
        self.uploads = upload_repository
        self.cache = cache
        self.ttl = ttl

    @staticmethod
    def cache_key(user_id: str) -> str:
        return f"user-details:user:{user_id}"

    def load(self, user_id: str) -> UserDetails:
        """Stored details of a user, or an empty record."""
        try:
            details = self.repository.get_by_user(user_id)
        except RepositoryError as e:
            raise DatabaseError(str(e))
        return details or UserDetails(user_id=user_id)

    async def get_cached(self, user_id: str) -> Dict[str, Any]:
        """Details from the cache, loaded from the database on a miss."""
        async def load_response() -> Dict[str, Any]:
            return self.load(user_id).to_response()

        return await self.cache.get_or_set(self.cache_key(user_id), load_response, self.ttl)

    async def update(self, user_id: str, request: UserDetailsUpdateRequest) -> Dict[str, Any]:
        """
        Replace a user's details.

        Blank phone numbers and addresses are dropped and the rest trimmed.

        Raises:
            BadRequestError: If ``profileImageId`` does not reference an upload
        """
        phones = [p.phone.strip() for p in request.phone_numbers if p.phone and p.phone.strip()]
        addresses = [a.address.strip() for a in request.saved_addresses if a.address and a.address.strip()]

        profile_image = None
        if request.profile_image_id not in (None, ""):
            try:
                uploaded = self.uploads.get_by_id(str(request.profile_image_id))
            except RepositoryError as e:
                raise DatabaseError(str(e))
            if uploaded is None:
                raise BadRequestError("Profile image not found", field="profileImageId")
            profile_image = ProfileImage(id=uploaded.id, url=uploaded.url)

        full_name = request.full_name.strip() if request.full_name else None
        details = UserDetails(
            user_id=user_id,
            full_name=full_name or None,
            phone_numbers=[PhoneNumber(phone=p) for p in phones],
            saved_addresses=[SavedAddress(address=a) for a in addresses],
            profile_image=profile_image,
        )

        try:
            saved = self.repository.upsert(details)
        except RepositoryError as e:
            raise DatabaseError(str(e))

        await self.cache.delete(self.cache_key(user_id))
        logger.info("User details updated", extra={"phones": len(phones), "addresses": len(addresses)})
        return saved.to_response()

    async def clear_cache(self, user_id: str) -> Dict[str, bool]:
        await self.cache.delete(self.cache_key(user_id))
        return {"ok": True}

    async def me(self, user: CurrentUser) -> Dict[str, Any]:
        """The authenticated user with their details."""
        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "userDetails": await self.get_cached(user.id),
        }
