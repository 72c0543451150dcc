import time
from typing import Callable

from fastapi import FastAPI, Request

from storefront.core.logging import get_logger, set_correlation_id

logger = get_logger(__name__)


def register_request_logging(app: FastAPI) -> None:
    """
    Tag every request with a correlation id and log its completion.

    The id is read from ``X-Correlation-ID`` (or generated) and echoed on
    the response.
    """

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next: Callable):
        correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Request failed: {str(e)}",
                extra={
                    "request_path": request.url.path,
                    "method": request.method,
                    "process_time_ms": round((time.time() - start_time) * 1000, 2),
                },
                exc_info=True,
            )
            raise

        response.headers["X-Correlation-ID"] = correlation_id
        logger.info(
            "Request completed",
            extra={
                "request_path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "process_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )
        return response
