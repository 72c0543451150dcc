from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.core.exceptions import APIException, DatabaseError, NotFoundError, RepositoryError
from storefront.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


def _error_body(code: str, message: str, status_code: int, context=None) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "status_code": status_code,
            "context": context or {},
        }
    }


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Client errors are logged at warning level, server errors at error level.
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"API Exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "error_code": exc.code,
            "context": exc.context,
            "request_path": request.url.path,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_not_found_exception(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(
        f"Resource not found: {exc.detail}",
        extra={
            "resource_type": exc.context.get("resource_type") if exc.context else None,
            "resource_id": exc.context.get("resource_id") if exc.context else None,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_validation_exception(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation errors as 400 with the offending fields."""
    errors = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    logger.warning("Request validation error", extra={"errors": errors, "request_path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            "validation_error",
            "Request validation error",
            status.HTTP_400_BAD_REQUEST,
            {"errors": errors},
        ),
    )


async def handle_repository_exception(request: Request, exc: RepositoryError) -> JSONResponse:
    return await handle_api_exception(request, DatabaseError(str(exc)))


async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            "internal_server_error",
            "An unexpected error occurred",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(NotFoundError, handle_not_found_exception)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_exception)
    app.add_exception_handler(RepositoryError, handle_repository_exception)
    app.add_exception_handler(Exception, handle_unhandled_exception)
