"""Folder hierarchy: create, rename, delete and list folders of one owner.

Sibling names are unique per (owner, parent) after trimming. The check here
gives a friendly error; the unique constraint/index on the table closes the
race between concurrent creators, and its violation is reported the same way.
Deletion is refused while the folder still holds folders or files; that check
is advisory under concurrency, the store has no cross-table guarantee.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import select, desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.exceptions import ConflictError, NotFoundError, ValidationError
from driveclone.models.base import utcnow
from driveclone.models.file_record import FileRecord
from driveclone.models.folder import Folder
from driveclone.services.ids import parse_id, parse_parent_id

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "A folder with this name already exists"


def clean_name(name, message: str) -> str:
    if not name or not isinstance(name, str) or not name.strip():
        raise ValidationError(message)
    return name.strip()


def _same_parent(parent_id: Optional[uuid.UUID]):
    if parent_id is None:
        return Folder.parent_id.is_(None)
    return Folder.parent_id == parent_id


async def get_folder(db: AsyncSession, owner_id: str, folder_id, message: str = "Folder not found") -> Folder:
    """Load a folder owned by ``owner_id``; anything else is NotFoundError."""
    fid = parse_id(folder_id, message)
    result = await db.execute(
        select(Folder).where(Folder.id == fid, Folder.user_id == owner_id)
    )
    folder = result.scalar_one_or_none()
    if not folder:
        raise NotFoundError(message)
    return folder


async def _sibling_exists(
    db: AsyncSession, owner_id: str, parent_id: Optional[uuid.UUID], name: str,
    exclude_id: Optional[uuid.UUID] = None,
) -> bool:
    query = (
        select(Folder.id)
        .where(Folder.user_id == owner_id, _same_parent(parent_id), Folder.name == name)
    )
    if exclude_id is not None:
        query = query.where(Folder.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


async def list_folders(db: AsyncSession, owner_id: str, parent_id=None) -> list[Folder]:
    """Folders directly under ``parent_id`` (root level for None), newest first."""
    try:
        pid = parse_parent_id(parent_id, "Folder not found")
    except NotFoundError:
        return []
    result = await db.execute(
        select(Folder)
        .where(Folder.user_id == owner_id, _same_parent(pid))
        .order_by(desc(Folder.created_at))
    )
    return list(result.scalars().all())


async def create_folder(db: AsyncSession, owner_id: str, name, parent_id=None) -> Folder:
    """Create a folder and materialize its ancestor path from the parent's."""
    name = clean_name(name, "Folder name is required")
    pid = parse_parent_id(parent_id, "Parent folder not found")

    path: list[str] = []
    if pid is not None:
        parent = await get_folder(db, owner_id, pid, "Parent folder not found")
        path = [*(parent.path or []), str(parent.id)]

    if await _sibling_exists(db, owner_id, pid, name):
        raise ConflictError(DUPLICATE_NAME)

    now = utcnow()
    folder = Folder(
        name=name,
        parent_id=pid,
        user_id=owner_id,
        path=path,
        created_at=now,
        updated_at=now,
    )
    db.add(folder)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    await db.refresh(folder)
    logger.info("Created folder %s (%r) for user %s", folder.id, folder.name, owner_id)
    return folder


async def rename_folder(db: AsyncSession, owner_id: str, folder_id, name) -> Folder:
    """Rename in place. The stored path holds ancestor ids only, so it is untouched."""
    name = clean_name(name, "Folder name is required")
    folder = await get_folder(db, owner_id, folder_id)

    if await _sibling_exists(db, owner_id, folder.parent_id, name, exclude_id=folder.id):
        raise ConflictError(DUPLICATE_NAME)

    folder.name = name
    folder.updated_at = utcnow()
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_NAME)
    await db.refresh(folder)
    logger.info("Renamed folder %s to %r", folder.id, folder.name)
    return folder


async def delete_folder(db: AsyncSession, owner_id: str, folder_id) -> None:
    """Delete an empty folder. Never cascades."""
    folder = await get_folder(db, owner_id, folder_id)

    child = await db.execute(
        select(Folder.id)
        .where(Folder.user_id == owner_id, Folder.parent_id == folder.id)
        .limit(1)
    )
    contained = await db.execute(
        select(FileRecord.id)
        .where(FileRecord.user_id == owner_id, FileRecord.folder_id == folder.id)
        .limit(1)
    )
    if child.first() is not None or contained.first() is not None:
        raise ValidationError("Cannot delete folder that contains files or subfolders")

    await db.delete(folder)
    await db.commit()
    logger.info("Deleted folder %s for user %s", folder.id, owner_id)
