from typing import Any, Dict, List

from fastapi import APIRouter, Depends, File, UploadFile

from storefront.api.dependencies import get_upload_service
from storefront.core.security import get_current_user
from storefront.domain.models.user import CurrentUser
from storefront.services.upload_service import UploadService, read_upload

router = APIRouter(tags=["Upload"])


@router.post("/upload", summary="Upload one or more files")
async def upload_files(
    files: List[UploadFile] = File(...),
    user: CurrentUser = Depends(get_current_user),
    service: UploadService = Depends(get_upload_service),
) -> List[Dict[str, Any]]:
    incoming = [(f.filename, f.content_type, await read_upload(f, service.max_size)) for f in files]
    stored = service.store(incoming)
    return [record.to_response() for record in stored]
