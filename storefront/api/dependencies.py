from functools import lru_cache

from fastapi import Depends

from storefront.core.config import Settings, get_settings
from storefront.core.logging import get_logger
from storefront.infrastructure.cache import CacheStrategy, MemoryCache, RedisCache
from storefront.infrastructure.database.mongodb.client import MongoDBClient
from storefront.infrastructure.repositories import (
    CartRepository,
    CategoryRepository,
    PostcodeRepository,
    ProductRepository,
    UploadRepository,
    UserDetailsRepository,
)
from storefront.infrastructure.storage import LocalFileStorage
from storefront.services.cart_service import CartService, RedisCartService
from storefront.services.category_service import CategoryService
from storefront.services.delivery_service import DeliveryService
from storefront.services.product_service import ProductService
from storefront.services.upload_service import UploadService
from storefront.services.user_details_service import UserDetailsService

# Initialize logger
logger = get_logger(__name__)


@lru_cache()
def get_mongodb_client() -> MongoDBClient:
    """Process-wide MongoDB client; the connection opens on first use."""
    settings = get_settings()
    return MongoDBClient(
        connection_uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        pool_size=settings.MONGODB_POOL_SIZE,
        connect_timeout=settings.MONGODB_TIMEOUT_MS,
        connect_retries=settings.MONGODB_CONNECT_RETRIES,
    )


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Process-wide cache.

    Redis when ``REDIS_HOST`` is configured, otherwise an in-process memory
    cache (single worker development setups).
    """
    settings = get_settings()
    if settings.REDIS_HOST:
        return RedisCache(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            password=settings.REDIS_PASSWORD,
            db=settings.REDIS_DB,
            prefix=settings.REDIS_PREFIX,
        )

    logger.warning("REDIS_HOST not set, using in-memory cache")
    return MemoryCache()


def get_category_repository(db: MongoDBClient = Depends(get_mongodb_client)) -> CategoryRepository:
    return CategoryRepository(db)


def get_product_repository(db: MongoDBClient = Depends(get_mongodb_client)) -> ProductRepository:
    return ProductRepository(db)


def get_cart_repository(db: MongoDBClient = Depends(get_mongodb_client)) -> CartRepository:
    return CartRepository(db)


def get_user_details_repository(db: MongoDBClient = Depends(get_mongodb_client)) -> UserDetailsRepository:
    return UserDetailsRepository(db)


def get_upload_repository(db: MongoDBClient = Depends(get_mongodb_client)) -> UploadRepository:
    return UploadRepository(db)


def get_postcode_repository(db: MongoDBClient = Depends(get_mongodb_client)) -> PostcodeRepository:
    return PostcodeRepository(db)


def get_category_service(
    categories: CategoryRepository = Depends(get_category_repository),
    products: ProductRepository = Depends(get_product_repository),
    settings: Settings = Depends(get_settings),
) -> CategoryService:
    return CategoryService(categories, products, default_page_size=settings.CATEGORY_PAGE_SIZE)


def get_product_service(products: ProductRepository = Depends(get_product_repository)) -> ProductService:
    return ProductService(products)


def get_cart_service(
    carts: CartRepository = Depends(get_cart_repository),
    products: ProductRepository = Depends(get_product_repository),
) -> CartService:
    return CartService(carts, products)


def get_redis_cart_service(
    cart_service: CartService = Depends(get_cart_service),
    cache: CacheStrategy = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> RedisCartService:
    return RedisCartService(cache, cart_service, ttl=settings.CART_CACHE_TTL)


def get_user_details_service(
    repository: UserDetailsRepository = Depends(get_user_details_repository),
    uploads: UploadRepository = Depends(get_upload_repository),
    cache: CacheStrategy = Depends(get_cache),
    settings: Settings = Depends(get_settings),
) -> UserDetailsService:
    return UserDetailsService(repository, uploads, cache, ttl=settings.USER_DETAILS_CACHE_TTL)


def get_upload_service(
    uploads: UploadRepository = Depends(get_upload_repository),
    settings: Settings = Depends(get_settings),
) -> UploadService:
    storage = LocalFileStorage(settings.MEDIA_ROOT, settings.MEDIA_URL)
    return UploadService(storage, uploads, max_size=settings.MAX_UPLOAD_SIZE)


def get_delivery_service(repository: PostcodeRepository = Depends(get_postcode_repository)) -> DeliveryService:
    return DeliveryService(repository)
