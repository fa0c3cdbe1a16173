"""Folders API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.database import get_db
from driveclone.dependencies import get_current_user_id
from driveclone.exceptions import ValidationError
from driveclone.models.folder import Folder
from driveclone.schemas.common import MessageResponse
from driveclone.schemas.folder import (
    FolderCreate, FolderUpdate,
    FolderEnvelope, FolderListEnvelope, FolderDetailEnvelope, FolderPathEnvelope,
)
from driveclone.services import folder_service
from driveclone.services.path_resolver import resolve_path

router = APIRouter(prefix="/api/folders", tags=["folders"])


def _require_id(folder_id: Optional[str]) -> str:
    if not folder_id:
        raise ValidationError("Folder ID is required")
    return folder_id


@router.get("", response_model=FolderListEnvelope)
async def list_folders(
    parent_id: Optional[str] = Query(None, alias="parentId"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List folders under a parent (root level when parentId is absent or 'null')."""
    folders = await folder_service.list_folders(db, user_id, parent_id)
    return {"success": True, "data": [_to_response(f) for f in folders]}


@router.post("", response_model=FolderEnvelope, status_code=201)
async def create_folder(
    body: FolderCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a folder at the root or under parentId."""
    folder = await folder_service.create_folder(db, user_id, body.name, body.parent_id)
    return {
        "success": True,
        "data": _to_response(folder),
        "message": "Folder created successfully",
    }


@router.put("", response_model=MessageResponse)
async def rename_folder(
    body: FolderUpdate,
    folder_id: Optional[str] = Query(None, alias="id"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Rename the folder given by ?id=."""
    await folder_service.rename_folder(db, user_id, _require_id(folder_id), body.name)
    return {"success": True, "message": "Folder updated successfully"}


@router.delete("", response_model=MessageResponse)
async def delete_folder(
    folder_id: Optional[str] = Query(None, alias="id"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete the empty folder given by ?id=."""
    await folder_service.delete_folder(db, user_id, _require_id(folder_id))
    return {"success": True, "message": "Folder deleted successfully"}


@router.get("/{folder_id}", response_model=FolderDetailEnvelope)
async def get_folder(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a folder together with its breadcrumb path."""
    folder = await folder_service.get_folder(db, user_id, folder_id)
    path = await resolve_path(db, user_id, folder.id)
    return {"success": True, "data": {"folder": _to_response(folder), "path": path}}


@router.get("/{folder_id}/path", response_model=FolderPathEnvelope)
async def get_folder_path(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Breadcrumb path only. Empty when the folder does not resolve."""
    return {"success": True, "path": await resolve_path(db, user_id, folder_id)}


@router.put("/{folder_id}", response_model=MessageResponse)
async def rename_folder_by_path(
    folder_id: str,
    body: FolderUpdate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await folder_service.rename_folder(db, user_id, folder_id, body.name)
    return {"success": True, "message": "Folder updated successfully"}


@router.delete("/{folder_id}", response_model=MessageResponse)
async def delete_folder_by_path(
    folder_id: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await folder_service.delete_folder(db, user_id, folder_id)
    return {"success": True, "message": "Folder deleted successfully"}


def _to_response(folder: Folder) -> dict:
    """Convert SQLAlchemy model to response dict."""
    return {
        "id": folder.id,
        "name": folder.name,
        "parent_id": folder.parent_id,
        "user_id": folder.user_id,
        "path": folder.path or [],
        "created_at": folder.created_at,
        "updated_at": folder.updated_at,
    }
