from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CartItemMetadata(BaseModel):
    """Product snapshot stored with a cart line at the time it was added."""

    model_config = ConfigDict(populate_by_name=True)

    product_name: Optional[str] = Field(None, alias="productName")
    product_image: Optional[str] = Field(None, alias="productImage")
    sku: Optional[str] = None


class CartItem(BaseModel):
    """A persistent cart line owned by one user."""

    id: Optional[str] = None
    user_id: str
    product_id: str
    variation_uuid: str
    quantity: int = Field(1, ge=1)
    unit_price: float = 0.0
    metadata: CartItemMetadata = Field(default_factory=CartItemMetadata)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_response(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "product": self.product_id,
            "uuid": self.variation_uuid,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "metadata": self.metadata.model_dump(by_alias=True),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class RedisCartEntry(BaseModel):
    """A line of the Redis-cached cart, keyed by variation id."""

    product: Any
    variation_id: Any
    quantity: int = Field(1, ge=1)
