"""
Cart services.

``CartService`` manages the persistent cart stored in MongoDB.
``RedisCartService`` keeps a lightweight per-user cart in the cache, seeded
from the persistent cart on a miss.
"""

from typing import Any, Dict, List, Optional

from storefront.core.exceptions import (
    AuthenticationError,
    BadRequestError,
    DatabaseError,
    EntityNotFoundError,
    NotFoundError,
    RepositoryError,
)
from storefront.core.logging import get_logger
from storefront.domain.models.cart import CartItem, CartItemMetadata, RedisCartEntry
from storefront.infrastructure.cache.base import CacheStrategy
from storefront.infrastructure.repositories.cart_repository import CartRepository
from storefront.infrastructure.repositories.product_repository import ProductRepository

logger = get_logger(__name__)


def cart_total(items: List[CartItem]) -> float:
    """Sum of unit price times quantity over the items, rounded to cents."""
    return round(sum(item.unit_price * item.quantity for item in items), 2)


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class CartService:
    """Manages the persistent cart of authenticated users."""

    def __init__(self, cart_repository: CartRepository, product_repository: ProductRepository):
        self.repository = cart_repository
        self.products = product_repository

    def list_items(self, user_id: str) -> List[CartItem]:
        try:
            return self.repository.list_by_user(user_id)
        except RepositoryError as e:
            raise DatabaseError(str(e))

    def get_cart(self, user_id: str) -> Dict[str, Any]:
        """The user's cart lines with the cart total."""
        items = self.list_items(user_id)
        return {
            "data": {
                "items": [item.to_response() for item in items],
                "total": cart_total(items),
            }
        }

    def add_item(self, user_id: str, product_id: Any, variation_id: Any, quantity: Optional[int] = 1) -> CartItem:
        """
        Add a variation to the cart or increase its quantity.

        The unit price is computed here from the stored variation, never
        taken from the client.

        Raises:
            BadRequestError: If the product or variation is missing or unknown
        """
        if _missing(product_id) or _missing(variation_id):
            raise BadRequestError("product and variation_id are required")
        quantity = quantity or 1

        try:
            product = self.products.get(str(product_id))
            if product is None:
                raise BadRequestError("Product not found", field="product")

            variation = product.find_variation(variation_id)
            if variation is None:
                raise BadRequestError("Variation not found for this product", field="variation_id")
            variation_key = variation.uuid or str(variation_id)

            existing = self.repository.find_by_user_and_variation(user_id, variation_key)
            if existing is not None:
                logger.info(
                    f"Incrementing cart item {existing.id} by {quantity}",
                    extra={"user_id": user_id},
                )
                return self.repository.update_quantity(existing.id, existing.quantity + quantity)

            item = CartItem(
                user_id=user_id,
                product_id=product.id or product.slug,
                variation_uuid=variation_key,
                quantity=quantity,
                unit_price=variation.unit_price(),
                metadata=CartItemMetadata(
                    product_name=product.name,
                    product_image=product.images[0].url if product.images else None,
                    sku=variation.sku,
                ),
            )
            return self.repository.create(item)
        except RepositoryError as e:
            raise DatabaseError(str(e))

    def _owned_item(self, user_id: str, item_id: str) -> CartItem:
        try:
            item = self.repository.get_by_id(item_id)
        except RepositoryError as e:
            raise DatabaseError(str(e))
        if item is None:
            raise NotFoundError("Cart item", item_id, detail="Cart item not found")
        if item.user_id != user_id:
            logger.warning(f"User {user_id} tried to access cart item {item_id}")
            raise AuthenticationError("Not your cart item")
        return item

    def update_quantity(self, user_id: str, item_id: str, quantity: Optional[int]) -> CartItem:
        """
        Set the quantity of one of the user's cart lines.

        Raises:
            BadRequestError: If quantity is missing or below 1
            NotFoundError: If the line does not exist
            AuthenticationError: If the line belongs to another user
        """
        if quantity is None:
            raise BadRequestError("quantity required", field="quantity")
        if quantity < 1:
            raise BadRequestError("quantity must be at least 1", field="quantity")

        self._owned_item(user_id, item_id)
        try:
            return self.repository.update_quantity(item_id, quantity)
        except EntityNotFoundError:
            raise NotFoundError("Cart item", item_id, detail="Cart item not found")
        except RepositoryError as e:
            raise DatabaseError(str(e))

    def remove_item(self, user_id: str, item_id: str) -> Dict[str, bool]:
        self._owned_item(user_id, item_id)
        try:
            self.repository.delete(item_id)
        except RepositoryError as e:
            raise DatabaseError(str(e))
        return {"ok": True}


class RedisCartService:
    """
    Cache-backed cart.

    Entries are ``{product, variation_id, quantity}`` stored as one list per
    user under ``cart:user:{user_id}``.
    """

    def __init__(self, cache: CacheStrategy, cart_service: CartService, ttl: int = 3600):
        self.cache = cache
        self.cart_service = cart_service
        self.ttl = ttl

    @staticmethod
    def cache_key(user_id: str) -> str:
        return f"cart:user:{user_id}"

    async def get_cart(self, user_id: str) -> List[Dict[str, Any]]:
        """Cached cart, seeded from the persistent cart on a miss."""
        key = self.cache_key(user_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        logger.debug(f"Cart cache miss for user {user_id}")
        items = [item.to_response() for item in self.cart_service.list_items(user_id)]
        await self.cache.set(key, items, self.ttl)
        return items

    async def add_item(self, user_id: str, product: Any, variation_id: Any, quantity: Optional[int] = 1) -> Dict[str, Any]:
        """
        Merge a line into the cached cart.

        Lines are merged on ``variation_id``; a new variation is appended.

        Raises:
            BadRequestError: If product or variation id is missing
        """
        if _missing(product) or _missing(variation_id):
            raise BadRequestError("Missing product or variation_id")
        quantity = quantity or 1

        key = self.cache_key(user_id)
        cart = await self.cache.get(key) or []

        for entry in cart:
            if str(entry.get("variation_id")) == str(variation_id):
                entry["quantity"] = int(entry.get("quantity") or 0) + quantity
                break
        else:
            entry = RedisCartEntry(product=product, variation_id=variation_id, quantity=quantity)
            cart.append(entry.model_dump())

        await self.cache.set(key, cart, self.ttl)
        logger.info(f"Cached cart updated for user {user_id}", extra={"lines": len(cart)})
        return {"ok": True, "cart": cart}

    async def clear(self, user_id: str) -> Dict[str, bool]:
        await self.cache.delete(self.cache_key(user_id))
        return {"ok": True}
