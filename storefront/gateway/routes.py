"""
Gateway routes.

Each route reads the auth cookie, relays the call to the storefront API and
passes the answer through. Category pages are assembled here: the page
number becomes an offset and the pagination block is computed from the
API's ``totalProducts``.
"""

from typing import Any, Dict, List
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from storefront.core.config import Settings, get_settings
from storefront.core.exceptions import NotFoundError, UpstreamError
from storefront.core.logging import get_logger
from storefront.gateway.client import StorefrontAPIClient, is_json, relay
from storefront.gateway.dependencies import get_api_client, get_token, require_token
from storefront.gateway.pagination import build_pagination, empty_filter_groups, page_offset
from storefront.services.upload_service import read_upload

logger = get_logger(__name__)

router = APIRouter()

# Query parameters of a category page that are not filters
_PAGING_PARAMS = {"page", "limit", "offset"}


@router.get("/api/auth/me", tags=["Auth"])
async def auth_me(request: Request, client: StorefrontAPIClient = Depends(get_api_client)) -> Response:
    """The signed-in user, or ``{"user": null}``."""
    token = get_token(request)
    if not token:
        return JSONResponse({"user": None}, status_code=401)

    try:
        upstream = await client.request("GET", "/api/user-details/me", token=token)
    except UpstreamError as e:
        return JSONResponse({"error": e.detail, "user": None}, status_code=500)

    if not is_json(upstream):
        return relay(upstream)

    try:
        body = upstream.json()
    except ValueError:
        logger.error("Unparsable user response", extra={"status_code": upstream.status_code})
        return JSONResponse({"user": None}, status_code=500)
    if body is not None and not isinstance(body, dict):
        return JSONResponse({"user": None}, status_code=500)
    return JSONResponse(body, status_code=upstream.status_code)


@router.get("/api/user-details", tags=["User details"])
async def get_user_details(
    token: str = Depends(require_token),
    client: StorefrontAPIClient = Depends(get_api_client),
) -> Response:
    return relay(await client.request("GET", "/api/user-details/redis", token=token))


@router.post("/api/user-details", tags=["User details"])
async def save_user_details(
    request: Request,
    token: str = Depends(require_token),
    client: StorefrontAPIClient = Depends(get_api_client),
) -> Response:
    body = await request.json()
    return relay(await client.request("POST", "/api/user-details", token=token, json=body))


@router.delete("/api/user-details", tags=["User details"])
async def clear_user_details(
    token: str = Depends(require_token),
    client: StorefrontAPIClient = Depends(get_api_client),
) -> Response:
    upstream = await client.request("DELETE", "/api/user-details/redis/clear", token=token)
    try:
        body = upstream.json()
    except ValueError:
        body = None
    return JSONResponse(body if body is not None else {"ok": True}, status_code=upstream.status_code)


def first_file_record(body: Any) -> Any:
    """Pick the first file record out of the shapes an upload API returns."""
    if isinstance(body, list):
        return body[0] if body else None
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body["data"][0] if body["data"] else None
    return body


def normalize_file_record(record: Dict[str, Any]) -> Dict[str, Any]:
    attributes = record.get("attributes") if isinstance(record.get("attributes"), dict) else {}
    data = record.get("data") if isinstance(record.get("data"), dict) else {}
    return {
        "id": record.get("id", data.get("id")),
        "url": record.get("url", attributes.get("url")),
        "name": record.get("name", attributes.get("name")),
    }


@router.post("/api/user-details/upload", tags=["User details"])
async def upload_profile_image(
    request: Request,
    token: str = Depends(require_token),
    client: StorefrontAPIClient = Depends(get_api_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Relay a multipart upload and answer with the first file's ``{id, url, name}``."""
    form = await request.form()
    files = []
    for upload in form.getlist("files"):
        if hasattr(upload, "read"):
            content = await read_upload(upload, settings.MAX_UPLOAD_SIZE)
            files.append(("files", (upload.filename, content, upload.content_type)))

    upstream = await client.request("POST", "/api/upload", token=token, files=files)
    if not is_json(upstream):
        return relay(upstream)

    record = first_file_record(upstream.json())
    if not isinstance(record, dict):
        logger.error("Unexpected upload response", extra={"status_code": upstream.status_code})
        return JSONResponse({"error": "Unexpected upload response"}, status_code=500)
    return JSONResponse(normalize_file_record(record), status_code=upstream.status_code)


@router.put("/api/cart/{item_id}", tags=["Cart"])
async def update_cart_item(
    item_id: str,
    request: Request,
    token: str = Depends(require_token),
    client: StorefrontAPIClient = Depends(get_api_client),
) -> Response:
    body = await request.json()
    return relay(await client.request("PUT", f"/api/cart/{item_id}", token=token, json=body))


@router.delete("/api/cart/{item_id}", tags=["Cart"])
async def delete_cart_item(
    item_id: str,
    token: str = Depends(require_token),
    client: StorefrontAPIClient = Depends(get_api_client),
) -> Response:
    upstream = await client.request("DELETE", f"/api/cart/{item_id}", token=token)
    return relay(upstream, default={"ok": True})


@router.get("/api/categories", tags=["Catalog"])
async def list_categories(client: StorefrontAPIClient = Depends(get_api_client)) -> List[Any]:
    """Category list for navigation; empty when the API is unavailable."""
    try:
        upstream = await client.request("GET", "/api/categories")
        if upstream.status_code != 200:
            logger.error(f"Error fetching categories: {upstream.status_code}")
            return []
        body = upstream.json()
    except (UpstreamError, ValueError) as e:
        logger.error(f"Failed to fetch categories: {str(e)}")
        return []
    return body if isinstance(body, list) else []


@router.get("/product-category/{slug}", tags=["Catalog"])
async def category_page(
    slug: str,
    request: Request,
    page: int = Query(1, ge=1),
    client: StorefrontAPIClient = Depends(get_api_client),
    settings: Settings = Depends(get_settings),
) -> Response:
    """
    Data for a category page.

    ``?page=1`` is redirected to the same URL without it so that the first
    page has a single address. Every other query parameter except paging is
    forwarded as a filter.
    """
    if page == 1 and "page" in request.query_params:
        remaining = [(k, v) for k, v in request.query_params.multi_items() if k != "page"]
        target = request.url.path + (f"?{urlencode(remaining)}" if remaining else "")
        return RedirectResponse(target, status_code=307)

    limit = settings.GATEWAY_PAGE_SIZE
    params = [(k, v) for k, v in request.query_params.multi_items() if k not in _PAGING_PARAMS]
    params += [("limit", str(limit)), ("offset", str(page_offset(page, limit)))]

    upstream = await client.request("GET", f"/api/category/{slug}", params=params)
    if upstream.status_code == 404:
        raise NotFoundError("Category", slug, detail="Category not found")
    if upstream.status_code >= 400 or not is_json(upstream):
        raise UpstreamError(
            detail=f"Category API answered {upstream.status_code}",
            context={"upstream_status": upstream.status_code},
        )

    category = upstream.json()
    if not isinstance(category, dict) or not category.get("name"):
        raise NotFoundError("Category", slug, detail="Category not found")

    total = int(category.get("totalProducts") or 0)
    return JSONResponse({
        "category": category,
        "filterCounts": category.get("filterCounts") or empty_filter_groups(),
        "pagination": build_pagination(page, total, limit),
    })
