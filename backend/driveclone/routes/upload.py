"""Upload API route: pushes bytes to the blob host, returns what to register."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File as FastAPIFile

from driveclone.config import settings
from driveclone.dependencies import get_current_user_id
from driveclone.exceptions import InternalError, ValidationError
from driveclone.schemas.file import UploadEnvelope
from driveclone.services.file_storage import FileStorageService, get_file_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["upload"])


@router.post("", response_model=UploadEnvelope)
async def upload_file(
    file: Optional[UploadFile] = FastAPIFile(None),
    user_id: str = Depends(get_current_user_id),
    storage: FileStorageService = Depends(get_file_storage),
):
    """Upload one multipart ``file`` part of at most MAX_UPLOAD_BYTES."""
    if file is None:
        raise ValidationError("No file uploaded")

    contents = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(contents) > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"File exceeds the {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB upload limit"
        )

    original_name = file.filename or "unnamed"
    content_type = file.content_type or "application/octet-stream"
    try:
        blob = await storage.save(
            contents, original_name, content_type,
            folder=f"{settings.CLOUDINARY_UPLOAD_FOLDER}/{user_id}",
        )
    except Exception as e:
        logger.exception(f"Upload of {original_name} for user {user_id} failed: {e}")
        raise InternalError("Failed to upload file")

    return {
        "success": True,
        "data": {
            "url": blob.url,
            "public_id": blob.public_id,
            "original_name": original_name,
            "size": len(contents),
            "type": content_type,
        },
    }
