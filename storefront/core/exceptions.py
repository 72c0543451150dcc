from fastapi import status
from typing import Any, Dict, Optional, Union


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class BadRequestError(APIException):
    """Exception raised when request input is missing or malformed."""

    def __init__(
        self,
        detail: str = "Bad request",
        code: str = "bad_request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"field": field} if field else {}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            context=merged_context
        )


class NotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Union[str, int],
        detail: Optional[str] = None,
        code: str = "not_found_error",
        context: Optional[Dict[str, Any]] = None
    ):
        if detail is None:
            detail = f"{resource_type} with id '{resource_id}' not found"

        merged_context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id)
        }
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            code=code,
            context=merged_context
        )


class AuthenticationError(APIException):
    """Exception raised when authentication fails."""

    def __init__(
        self,
        detail: str = "You must be logged in",
        code: str = "authentication_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            code=code,
            context=context
        )


class DatabaseError(APIException):
    """Exception raised when the document store fails."""

    def __init__(
        self,
        detail: str = "Database error",
        code: str = "database_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context=context
        )


class CacheError(APIException):
    """Exception raised when the cache backend fails."""

    def __init__(
        self,
        detail: str = "Cache error",
        code: str = "cache_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            code=code,
            context=context
        )


class UpstreamError(APIException):
    """Exception raised when the storefront API cannot be reached from the gateway."""

    def __init__(
        self,
        detail: str = "Upstream API error",
        code: str = "upstream_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(status_code=status_code, detail=detail, code=code, context=context)
        self.original_exception = original_exception

        if original_exception and self.context is not None:
            self.context["original_error"] = str(original_exception)


class RepositoryError(Exception):
    """Raised by repositories when a storage operation fails."""


class EntityNotFoundError(RepositoryError):
    """Raised by repositories when a document does not exist."""
