from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.middleware import register_request_logging
from storefront.core.config import get_settings, load_env_file
from storefront.core.exceptions import APIException
from storefront.core.logging import configure_logging, get_logger

# Load environment variables and configure logging early
load_env_file()
configure_logging()
logger = get_logger(__name__)


def handle_exceptions(app: FastAPI) -> None:
    """
    Gateway error handlers.

    The front end reads errors as ``{"error": message}``.
    """

    @app.exception_handler(APIException)
    async def api_exception_handler(request: Request, exc: APIException):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(f"Gateway error: {exc.detail}", extra={"status_code": exc.status_code, "request_path": request.url.path})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": [e["msg"] for e in exc.errors()]},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Server error"},
        )


def create_gateway_application() -> FastAPI:
    """
    Create and configure the gateway application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = get_settings()
    app = FastAPI(title=f"{settings.PROJECT_NAME} gateway", version=settings.VERSION, debug=settings.DEBUG)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_logging(app)
    handle_exceptions(app)

    from storefront.gateway.routes import router

    app.include_router(router)
    return app


app = create_gateway_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("storefront.gateway.main:app", host="0.0.0.0", port=3001, reload=get_settings().DEBUG)
