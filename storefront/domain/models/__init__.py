"""
Domain models package for the storefront.

These models are persistence-agnostic. Field names follow Python naming while
aliases keep the attribute names the storefront front end already consumes
(``SKU``, ``ColorTone``, ``categoryDiscount`` ...).
"""

from storefront.domain.models.catalog import (
    COLOR_TONES,
    FINISHES,
    SIZES,
    THICKNESSES,
    Category,
    Image,
    Product,
    SeoMeta,
    Variation,
)
from storefront.domain.models.cart import CartItem, CartItemMetadata, RedisCartEntry
from storefront.domain.models.delivery import Postcode
from storefront.domain.models.upload import UploadedFile
from storefront.domain.models.user import (
    CurrentUser,
    PhoneNumber,
    ProfileImage,
    SavedAddress,
    UserDetails,
)

__all__ = [
    "COLOR_TONES",
    "FINISHES",
    "SIZES",
    "THICKNESSES",
    "Category",
    "Image",
    "Product",
    "SeoMeta",
    "Variation",
    "CartItem",
    "CartItemMetadata",
    "RedisCartEntry",
    "Postcode",
    "UploadedFile",
    "CurrentUser",
    "PhoneNumber",
    "ProfileImage",
    "SavedAddress",
    "UserDetails",
]
