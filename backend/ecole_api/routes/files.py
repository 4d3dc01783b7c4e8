"""
École API — File Gateway Routes
================================

What:  POST /api/upload (multipart field "file") and POST /api/delete-file.
Why:   Teachers attach course material hosted on Drive; the returned
       `fileUrl` is stored by the frontend as the course's `fichier_url`.

Request Flow (upload):
    1. UploadLimitMiddleware refuses bodies whose Content-Length is over the cap
    2. Token Verifier authenticates the caller
    3. File bytes are read (and re-checked against the cap)
    4. DriveService checks READY, then uploads and grants public read
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ecole_api.config import settings
from ecole_api.exceptions import PayloadTooLargeError
from ecole_api.models.identity import Identity
from ecole_api.schemas.common import ErrorResponse
from ecole_api.schemas.file import DeleteFileRequest, DeleteFileResponse, UploadResponse
from ecole_api.security import get_current_identity
from ecole_api.services.drive_service import DriveService, get_drive_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Files"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"description": "No file part", "model": ErrorResponse},
        413: {"description": "File larger than the upload cap", "model": ErrorResponse},
        503: {"description": "Drive not configured", "model": ErrorResponse},
    },
    summary="Upload a file to Drive and get a shareable URL",
)
async def upload_file(
    file: Optional[UploadFile] = File(default=None, description="File to upload (max 20MB)"),
    actor: Identity = Depends(get_current_identity),
    drive: DriveService = Depends(get_drive_service),
) -> UploadResponse:
    content = b""
    name = None
    mime_type = None

    if file is not None:
        try:
            content = await file.read()
        finally:
            await file.close()
        name = file.filename
        mime_type = file.content_type

        if len(content) > settings.max_upload_size:
            raise PayloadTooLargeError(settings.max_upload_size, len(content))

        logger.info(
            "Upload request from %s: filename=%s, size=%d bytes",
            actor.id,
            name or "unknown",
            len(content),
        )

    uploaded = await drive.upload(content, name, mime_type)
    return UploadResponse(
        file_url=uploaded.url,
        file_name=uploaded.name,
        file_id=uploaded.id,
    )


@router.post(
    "/delete-file",
    response_model=DeleteFileResponse,
    responses={
        400: {"description": "Missing fileId", "model": ErrorResponse},
        404: {"description": "Unknown Drive file", "model": ErrorResponse},
        503: {"description": "Drive not configured", "model": ErrorResponse},
    },
    summary="Delete a Drive file by id",
)
async def delete_file(
    payload: Optional[DeleteFileRequest] = None,
    actor: Identity = Depends(get_current_identity),
    drive: DriveService = Depends(get_drive_service),
) -> DeleteFileResponse:
    file_id = payload.file_id if payload else None
    await drive.delete(file_id)
    logger.info("File %s deleted by %s", file_id, actor.id)
    return DeleteFileResponse()
