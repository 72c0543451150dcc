from typing import Any, Dict, Optional

import httpx
from fastapi import Response
from fastapi.responses import JSONResponse

from storefront.core.exceptions import UpstreamError
from storefront.core.logging import correlation_id, get_logger

logger = get_logger(__name__)


def is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "")


def relay(response: httpx.Response, default: Any = None) -> Response:
    """
    Pass an upstream response through with its status.

    JSON bodies are re-emitted as JSON; anything else is returned as
    ``text/plain``. When the JSON body cannot be parsed, ``default`` is
    returned instead if given.
    """
    if not is_json(response):
        return Response(content=response.text, status_code=response.status_code, media_type="text/plain")
    try:
        body = response.json()
    except ValueError:
        if default is None:
            raise
        body = default
    return JSONResponse(content=body, status_code=response.status_code)


class StorefrontAPIClient:
    """
    Client for the storefront API.

    A fresh ``httpx.AsyncClient`` is opened per call; ``transport`` lets
    tests substitute the network.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        corr_id = correlation_id.get()
        if corr_id:
            headers["X-Correlation-ID"] = corr_id
        return headers

    async def request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Call the storefront API.

        Args:
            method: HTTP method
            path: Absolute API path, e.g. ``/api/categories``
            token: Bearer token of the end user
            **kwargs: Passed to ``httpx.AsyncClient.request`` (params, json, files)

        Raises:
            UpstreamError: If the API cannot be reached
        """
        logger.debug(f"Upstream {method} {path}")
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                return await client.request(method, path, headers=self._headers(token), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Upstream {method} {path} failed: {str(e)}")
            raise UpstreamError(
                detail=str(e) or "Upstream request failed",
                status_code=500,
                original_exception=e,
            )
