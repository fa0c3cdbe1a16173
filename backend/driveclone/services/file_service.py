"""File registry: metadata records for blobs held by the storage service."""
import logging
from typing import Optional

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.config import settings
from driveclone.exceptions import NotFoundError, ValidationError
from driveclone.models.base import utcnow
from driveclone.models.file_record import FileRecord
from driveclone.services.folder_service import clean_name, get_folder
from driveclone.services.ids import parse_id, parse_parent_id

logger = logging.getLogger(__name__)

# Marks "folderId not sent" apart from an explicit null
UNSET = object()


def _missing(value) -> bool:
    return value is None or value == ""


def _owns_blob(owner_id: str, public_id: str) -> bool:
    # Upload route stores every blob under the caller's own folder
    prefix = f"{settings.CLOUDINARY_UPLOAD_FOLDER}/{owner_id}/"
    return public_id.startswith(prefix) and ".." not in public_id.split("/")


def _parse_size(size) -> int:
    try:
        size_bytes = int(size)
    except (TypeError, ValueError):
        raise ValidationError("Invalid file size")
    if size_bytes < 0:
        raise ValidationError("Invalid file size")
    return size_bytes


async def get_file(db: AsyncSession, owner_id: str, file_id) -> FileRecord:
    fid = parse_id(file_id, "File not found")
    result = await db.execute(
        select(FileRecord).where(FileRecord.id == fid, FileRecord.user_id == owner_id)
    )
    file_rec = result.scalar_one_or_none()
    if not file_rec:
        raise NotFoundError("File not found")
    return file_rec


async def list_files(db: AsyncSession, owner_id: str, folder_id=None) -> list[FileRecord]:
    """Files directly in ``folder_id`` (root level for None), newest first."""
    try:
        fid = parse_parent_id(folder_id, "Folder not found")
    except NotFoundError:
        return []
    folder_clause = FileRecord.folder_id.is_(None) if fid is None else FileRecord.folder_id == fid
    result = await db.execute(
        select(FileRecord)
        .where(FileRecord.user_id == owner_id, folder_clause)
        .order_by(desc(FileRecord.created_at))
    )
    return list(result.scalars().all())


async def create_file(
    db: AsyncSession,
    owner_id: str,
    *,
    name,
    original_name,
    type,
    size,
    url,
    folder_id=None,
    cloudinary_public_id: Optional[str] = None,
) -> FileRecord:
    """Register a blob that has already been uploaded."""
    if any(_missing(v) for v in (name, original_name, type, size, url)):
        raise ValidationError("Missing required file information")
    size_bytes = _parse_size(size)
    if cloudinary_public_id and not _owns_blob(owner_id, cloudinary_public_id):
        raise ValidationError("Invalid blob reference")

    fid = parse_parent_id(folder_id, "Folder not found")
    if fid is not None:
        await get_folder(db, owner_id, fid)

    now = utcnow()
    file_rec = FileRecord(
        name=name,
        original_name=original_name,
        mime_type=type,
        size_bytes=size_bytes,
        folder_id=fid,
        user_id=owner_id,
        url=url,
        cloudinary_public_id=cloudinary_public_id,
        created_at=now,
        updated_at=now,
    )
    db.add(file_rec)
    await db.commit()
    await db.refresh(file_rec)
    logger.info("Registered file %s (%r) for user %s", file_rec.id, file_rec.name, owner_id)
    return file_rec


async def update_file(db: AsyncSession, owner_id: str, file_id, name, folder_id=UNSET) -> FileRecord:
    """Rename a file and, when ``folder_id`` is given, move it.

    File names carry no sibling-uniqueness constraint.
    """
    name = clean_name(name, "File name is required")
    file_rec = await get_file(db, owner_id, file_id)

    if folder_id is not UNSET:
        fid = parse_parent_id(folder_id, "Target folder not found")
        if fid is not None:
            await get_folder(db, owner_id, fid, "Target folder not found")
        file_rec.folder_id = fid

    file_rec.name = name
    file_rec.updated_at = utcnow()
    await db.commit()
    await db.refresh(file_rec)
    logger.info("Updated file %s (name=%r, folder=%s)", file_rec.id, file_rec.name, file_rec.folder_id)
    return file_rec


async def delete_file(db: AsyncSession, owner_id: str, file_id, storage) -> Optional[str]:
    """Delete a file record and, best-effort, its blob.

    A blob host failure is logged and ignored; the record goes regardless.
    Returns the blob's public id.
    """
    file_rec = await get_file(db, owner_id, file_id)
    public_id = file_rec.cloudinary_public_id

    if public_id:
        try:
            await storage.delete(public_id, mime_type=file_rec.mime_type)
        except Exception as e:
            logger.warning(f"Failed to delete blob {public_id} for file {file_rec.id}: {e}")

    await db.delete(file_rec)
    await db.commit()
    logger.info("Deleted file %s for user %s", file_rec.id, owner_id)
    return public_id
