from storefront.infrastructure.repositories.cart_repository import CartRepository
from storefront.infrastructure.repositories.category_repository import CategoryRepository
from storefront.infrastructure.repositories.postcode_repository import PostcodeRepository
from storefront.infrastructure.repositories.product_repository import ProductRepository
from storefront.infrastructure.repositories.upload_repository import UploadRepository
from storefront.infrastructure.repositories.user_details_repository import UserDetailsRepository

__all__ = [
    "CartRepository",
    "CategoryRepository",
    "PostcodeRepository",
    "ProductRepository",
    "UploadRepository",
    "UserDetailsRepository",
]
