from pydantic import BaseModel, Field


class Postcode(BaseModel):
    """Delivery prices for one postcode."""

    postcode: str
    economy_price: float = Field(..., ge=0)
    premium_price: float = Field(..., ge=0)

    @staticmethod
    def normalize(postcode: str) -> str:
        """Postcodes are stored and looked up trimmed and upper-cased."""
        return postcode.strip().upper()
