from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from popup_pos.core.config import UPLOAD_MAX_BYTES
from popup_pos.deps import require_org_session
from popup_pos.services.sessions import SessionClaims
from popup_pos.services.storage import upload_image

router = APIRouter(prefix="/api/{org}/admin", tags=["admin-upload"])


class UploadResponse(BaseModel):
    url: str


@router.post("/upload", response_model=UploadResponse)
def upload_menu_image(
    file: UploadFile = File(...),
    claims: SessionClaims = Depends(require_org_session),
):
    # One byte over the limit is enough to reject the upload.
    data = file.file.read(UPLOAD_MAX_BYTES + 1)
    url = upload_image(claims.organization_id, data, file.content_type)
    return UploadResponse(url=url)
