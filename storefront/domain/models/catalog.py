from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Enumerations declared on the CMS product variation component
COLOR_TONES = [
    "Beige",
    "Black",
    "Blue",
    "Bronze",
    "Brown",
    "Cream",
    "Golden",
    "Green",
    "Grey",
    "Mint",
    "Multi",
    "Red",
    "Silver",
    "White",
    "Yellow",
]

FINISHES = [
    "Acid",
    "Flamed",
    "Half honed and tumbled brushed",
    "Honed",
    "Honed/tumbled",
    "Natural",
    "Natural half honed And tumbled brushed",
    "r11",
    "Tumbled",
]

THICKNESSES = [
    "THICKNESS 12-20MM",
    "THICKNESS 15-25MM",
    "THICKNESS 18MM",
    "THICKNESS 20MM",
    "THICKNESS 22MM",
    "THICKNESS 25-35MM",
    "THICKNESS 25-45MM",
    "THICKNESS 30-40MM",
    "THICKNESS 35-50MM",
    "THICKNESS 35-55MM",
    "THICKNESS 68MM",
]

# "NA" is a valid stored value but never offered as a filter option
SIZES = [
    "SIZE 100X100",
    "SIZE 100X200",
    "SIZE 150X900",
    "SIZE 200X600",
    "SIZE 228X110",
    "SIZE 600X1200",
    "SIZE 600X150",
    "SIZE 600X600",
    "SIZE 600X900",
    "Mix Pack",
]


class Image(BaseModel):
    """Media reference attached to categories and products."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    url: str
    alternative_text: Optional[str] = Field(None, alias="alt")

    def to_response(self) -> Dict[str, Any]:
        return {"id": self.id, "url": self.url, "alt": self.alternative_text}


class SeoMeta(BaseModel):
    """SEO metadata block rendered into the category page head."""

    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_tag: Optional[str] = None
    robots: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    schemas: Optional[Dict[str, Any]] = None


class Variation(BaseModel):
    """A purchasable variation of a product (size, finish, pack, price...)."""

    model_config = ConfigDict(populate_by_name=True)

    uuid: Optional[str] = None
    sku: Optional[str] = Field(None, alias="SKU")
    color_tone: Optional[str] = Field(None, alias="ColorTone")
    finish: Optional[str] = Field(None, alias="Finish")
    thickness: Optional[str] = Field(None, alias="Thickness")
    size: Optional[str] = Field(None, alias="Size")
    pack_size: Optional[float] = Field(None, alias="PackSize", ge=0)
    pcs: Optional[int] = Field(None, alias="Pcs", ge=0)
    price: Optional[float] = Field(None, alias="Price", ge=0)
    per_m2: Optional[float] = Field(None, alias="Per_m2", ge=0)
    stock: Optional[int] = Field(None, alias="Stock")

    def unit_price(self) -> float:
        """Price of one pack: price per m2 times the pack size, 0 when either is unknown."""
        if not self.per_m2 or not self.pack_size:
            return 0.0
        return round(self.per_m2 * self.pack_size, 2)


class Product(BaseModel):
    """Catalogue product with its embedded variations."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str
    slug: str
    product_discount: Optional[float] = Field(None, alias="productDiscount", ge=0, le=100)
    images: List[Image] = Field(default_factory=list)
    variations: List[Variation] = Field(default_factory=list, alias="variation")
    category_slugs: List[str] = Field(default_factory=list, alias="categories")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    def find_variation(self, variation_id: Any) -> Optional[Variation]:
        """
        Find a variation by its uuid, falling back to its position.

        Cart requests identify variations by uuid; variations stored before
        uuids were assigned are addressed by their index.
        """
        wanted = str(variation_id)
        for variation in self.variations:
            if variation.uuid is not None and variation.uuid == wanted:
                return variation
        if wanted.isdigit() and int(wanted) < len(self.variations):
            candidate = self.variations[int(wanted)]
            if candidate.uuid is None:
                return candidate
        return None


class Category(BaseModel):
    """Product category with its landing-page content."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str
    slug: str
    category_discount: Optional[float] = Field(None, alias="categoryDiscount", ge=0, le=100)
    short_description: Optional[str] = None
    images: List[Image] = Field(default_factory=list)
    seo: Optional[SeoMeta] = None
