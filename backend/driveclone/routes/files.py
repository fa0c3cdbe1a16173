"""Files API routes."""
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.database import get_db
from driveclone.dependencies import get_current_user_id
from driveclone.exceptions import NotFoundError, ValidationError
from driveclone.models.file_record import FileRecord
from driveclone.schemas.common import MessageResponse
from driveclone.schemas.file import (
    FileCreate, FileUpdate,
    FileEnvelope, FileListEnvelope, FileDeleteEnvelope,
)
from driveclone.services import file_service
from driveclone.services.file_storage import FileStorageService, get_file_storage

router = APIRouter(prefix="/api/files", tags=["files"])


def _content_disposition(filename: str) -> str:
    # Same encoding rule as starlette.responses.FileResponse
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _require_id(file_id: Optional[str]) -> str:
    if not file_id:
        raise ValidationError("File ID is required")
    return file_id


async def _update(db: AsyncSession, user_id: str, file_id: str, body: FileUpdate) -> None:
    if "folder_id" in body.model_fields_set:
        await file_service.update_file(db, user_id, file_id, body.name, body.folder_id)
    else:
        await file_service.update_file(db, user_id, file_id, body.name)


async def _delete(db: AsyncSession, user_id: str, file_id: str, storage: FileStorageService) -> dict:
    public_id = await file_service.delete_file(db, user_id, file_id, storage)
    return {
        "success": True,
        "message": "File deleted successfully",
        "data": {"cloudinary_public_id": public_id},
    }


@router.get("", response_model=FileListEnvelope)
async def list_files(
    folder_id: Optional[str] = Query(None, alias="folderId"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List files in a folder (root level when folderId is absent or 'null')."""
    files = await file_service.list_files(db, user_id, folder_id)
    return {"success": True, "data": [_to_response(f) for f in files]}


@router.post("", response_model=FileEnvelope, status_code=201)
async def create_file(
    body: FileCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Register an uploaded blob as a file record."""
    file_rec = await file_service.create_file(db, user_id, **body.model_dump())
    return {
        "success": True,
        "data": _to_response(file_rec),
        "message": "File uploaded successfully",
    }


@router.put("", response_model=MessageResponse)
async def update_file(
    body: FileUpdate,
    file_id: Optional[str] = Query(None, alias="id"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Rename and optionally move the file given by ?id=."""
    await _update(db, user_id, _require_id(file_id), body)
    return {"success": True, "message": "File updated successfully"}


@router.delete("", response_model=FileDeleteEnvelope)
async def delete_file(
    file_id: Optional[str] = Query(None, alias="id"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    storage: FileStorageService = Depends(get_file_storage),
):
    """Delete the file given by ?id= and, best-effort, its blob."""
    return await _delete(db, user_id, _require_id(file_id), storage)


@router.get("/{file_id}", response_model=FileEnvelope)
async def get_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get file metadata by ID."""
    file_rec = await file_service.get_file(db, user_id, file_id)
    return {"success": True, "data": _to_response(file_rec)}


@router.get("/{file_id}/download")
async def download_file(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    storage: FileStorageService = Depends(get_file_storage),
):
    """Stream a locally stored blob, or redirect to the hosted url."""
    file_rec = await file_service.get_file(db, user_id, file_id)
    if storage.storage_type != "local":
        return RedirectResponse(file_rec.url)
    if not file_rec.cloudinary_public_id:
        raise NotFoundError("File content not found")
    try:
        content = await storage.read(file_rec.cloudinary_public_id)
    except FileNotFoundError:
        raise NotFoundError("File content not found")
    return Response(
        content=content,
        media_type=file_rec.mime_type or "application/octet-stream",
        headers={"Content-Disposition": _content_disposition(file_rec.original_name)},
    )


@router.put("/{file_id}", response_model=MessageResponse)
async def update_file_by_path(
    file_id: str,
    body: FileUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await _update(db, user_id, file_id, body)
    return {"success": True, "message": "File updated successfully"}


@router.delete("/{file_id}", response_model=FileDeleteEnvelope)
async def delete_file_by_path(
    file_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    storage: FileStorageService = Depends(get_file_storage),
):
    return await _delete(db, user_id, file_id, storage)


def _to_response(file_rec: FileRecord) -> dict:
    """Convert SQLAlchemy model to response dict."""
    return {
        "id": file_rec.id,
        "name": file_rec.name,
        "original_name": file_rec.original_name,
        "type": file_rec.mime_type,
        "size": file_rec.size_bytes,
        "folder_id": file_rec.folder_id,
        "user_id": file_rec.user_id,
        "url": file_rec.url,
        "cloudinary_public_id": file_rec.cloudinary_public_id,
        "created_at": file_rec.created_at,
        "updated_at": file_rec.updated_at,
    }
