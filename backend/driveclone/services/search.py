"""Case-insensitive substring search over one owner's folder and file names."""
from typing import Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.config import settings
from driveclone.exceptions import ValidationError
from driveclone.models.file_record import FileRecord
from driveclone.models.folder import Folder


async def search(
    db: AsyncSession, owner_id: str, query: Optional[str], limit: Optional[int] = None,
) -> tuple[list[Folder], list[FileRecord]]:
    """Match folder names, and file names or original names, against ``query``.

    Each list is capped at ``limit``; ordering is whatever the store returns.
    ``%`` and ``_`` in the query are matched literally.
    """
    if not query or not query.strip():
        raise ValidationError("Search query is required")
    term = query.strip()
    if limit is None:
        limit = settings.SEARCH_RESULT_LIMIT

    folders = await db.execute(
        select(Folder)
        .where(Folder.user_id == owner_id)
        .where(Folder.name.icontains(term, autoescape=True))
        .limit(limit)
    )
    files = await db.execute(
        select(FileRecord)
        .where(FileRecord.user_id == owner_id)
        .where(or_(
            FileRecord.name.icontains(term, autoescape=True),
            FileRecord.original_name.icontains(term, autoescape=True),
        ))
        .limit(limit)
    )
    return list(folders.scalars().all()), list(files.scalars().all())
