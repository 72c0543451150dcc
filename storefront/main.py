from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from storefront.api.error_handlers import register_exception_handlers
from storefront.api.middleware import register_request_logging
from storefront.core.config import get_settings, load_env_file
from storefront.core.logging import configure_logging, get_logger

# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: log startup and close the MongoDB client on shutdown."""
    settings = get_settings()
    logger.info(f"Starting {settings.PROJECT_NAME} {settings.VERSION}")

    yield

    from storefront.api.dependencies import get_mongodb_client

    if get_mongodb_client.cache_info().currsize:
        get_mongodb_client().close()
    logger.info(f"Shutting down {settings.PROJECT_NAME}")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    configure_middleware(app)
    register_exception_handlers(app)
    register_routers(app)

    app.mount(
        settings.MEDIA_URL,
        StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
        name="media",
    )
    return app


def configure_middleware(app: FastAPI) -> None:
    """
    Configure middleware components for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    settings = get_settings()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_logging(app)


def register_routers(app: FastAPI) -> None:
    """
    Register API routers with the FastAPI application.

    The cached cart router goes before the persistent cart router so that
    ``/cart/redis`` is not taken for a cart item id.
    """
    settings = get_settings()

    # Import routers here to avoid circular imports
    from storefront.api.routes import (
        cart,
        cart_redis,
        categories,
        delivery,
        products,
        upload,
        user_details,
    )
    from storefront.api.routes.health import health_router

    app.include_router(health_router, prefix="/health", tags=["Health"])
    for module in (categories, products, cart_redis, cart, user_details, upload, delivery):
        app.include_router(module.router, prefix=settings.API_PREFIX)


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=get_settings().DEBUG)
