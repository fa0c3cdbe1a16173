"""Search API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.database import get_db
from driveclone.dependencies import get_current_user_id
from driveclone.routes.files import _to_response as file_to_response
from driveclone.routes.folders import _to_response as folder_to_response
from driveclone.schemas.search import SearchEnvelope
from driveclone.services.search import search

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("", response_model=SearchEnvelope)
async def search_drive(
    q: Optional[str] = Query(None, description="Substring to match, case-insensitive"),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Search the caller's folders and files by name. Each list holds at most 20 hits."""
    folders, files = await search(db, user_id, q)
    return {
        "success": True,
        "data": {
            "folders": [{**folder_to_response(f), "kind": "folder"} for f in folders],
            "files": [{**file_to_response(f), "kind": "file"} for f in files],
        },
    }
