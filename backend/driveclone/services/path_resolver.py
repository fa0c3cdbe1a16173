"""Breadcrumbs for a folder, rebuilt by walking parent links.

The walk is best-effort: a parent that cannot be loaded (deleted out of band,
or owned by someone else) ends the walk and whatever was resolved so far is
returned. The materialized ``Folder.path`` column is not consulted.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.exceptions import NotFoundError
from driveclone.models.folder import Folder
from driveclone.services.ids import parse_id

logger = logging.getLogger(__name__)


async def _load(db: AsyncSession, owner_id: str, folder_id: uuid.UUID) -> Optional[Folder]:
    result = await db.execute(
        select(Folder).where(Folder.id == folder_id, Folder.user_id == owner_id)
    )
    return result.scalar_one_or_none()


async def resolve_path(db: AsyncSession, owner_id: str, folder_id) -> list[dict]:
    """Return ``[{"id", "name"}, ...]`` from the root down to ``folder_id``.

    Empty when the folder itself does not resolve.
    """
    try:
        current: Optional[uuid.UUID] = parse_id(folder_id, "Folder not found")
    except NotFoundError:
        return []

    path: list[dict] = []
    seen: set[uuid.UUID] = set()
    while current is not None:
        if current in seen:
            logger.warning("Parent cycle at folder %s for user %s", current, owner_id)
            break
        seen.add(current)

        folder = await _load(db, owner_id, current)
        if folder is None:
            if path:
                logger.warning("Dangling parent %s for user %s; path truncated", current, owner_id)
            break
        path.insert(0, {"id": str(folder.id), "name": folder.name})
        current = folder.parent_id
    return path
