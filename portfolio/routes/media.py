"""
Admin media uploads and signed download links.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from portfolio.dependencies import get_storage_client, require_admin
from portfolio.schemas import (
    MediaUploadResponse,
    SignUrlResponse,
    StatusResponse,
    UploadUrlRequest,
    UploadUrlResponse,
)
from portfolio.services import media
from portfolio.storage import StorageClient

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@router.post("/media", response_model=MediaUploadResponse, status_code=201)
async def upload_media(
    file: UploadFile = File(...),
    folder: str = Form(...),
    storage: StorageClient = Depends(get_storage_client),
):
    if not file.filename:
        raise HTTPException(status_code=400, detail="File required")
    # One byte past the limit is enough to reject an oversized file.
    data = await file.read(media.MAX_UPLOAD_BYTES + 1)
    path, url = media.upload_media(
        storage, folder, file.filename, data, file.content_type or ""
    )
    return MediaUploadResponse(path=path, url=url)


@router.get("/sign-url", response_model=SignUrlResponse)
def sign_url(
    path: str = Query(..., min_length=1),
    storage: StorageClient = Depends(get_storage_client),
):
    return SignUrlResponse(url=media.sign_url(storage, path))


@router.post("/media/upload-url", response_model=UploadUrlResponse)
def create_upload_url(
    payload: UploadUrlRequest,
    storage: StorageClient = Depends(get_storage_client),
):
    path, upload_url, url = media.presign_upload(
        storage, payload.folder, payload.filename, payload.content_type
    )
    return UploadUrlResponse(path=path, upload_url=upload_url, url=url)


@router.delete("/media", response_model=StatusResponse)
def delete_media(
    path: str = Query(..., min_length=1),
    storage: StorageClient = Depends(get_storage_client),
):
    media.delete_media(storage, path)
    return StatusResponse(status="ok")
