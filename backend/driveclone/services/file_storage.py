"""File storage abstraction. Local filesystem for dev, Cloudinary for production."""
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import aiofiles

from driveclone.config import settings
from driveclone.services.cloudinary_client import CloudinaryClient, resource_type_for

logger = logging.getLogger(__name__)


@dataclass
class StoredBlob:
    url: str
    public_id: str
    resource_type: str = "raw"


class FileStorageService:
    """Handles blob write/read/delete on local disk or Cloudinary."""

    def __init__(self, storage_type: Optional[str] = None, base_path: Optional[str] = None):
        self.storage_type = storage_type or settings.FILE_STORAGE_TYPE
        self._cloudinary: Optional[CloudinaryClient] = None
        if self.storage_type == "local":
            self.base_path = Path(base_path or settings.FILE_STORAGE_PATH)
            self.base_path.mkdir(parents=True, exist_ok=True)

    @property
    def cloudinary(self) -> CloudinaryClient:
        if self._cloudinary is None:
            self._cloudinary = CloudinaryClient(
                settings.CLOUDINARY_CLOUD_NAME,
                settings.CLOUDINARY_API_KEY,
                settings.CLOUDINARY_API_SECRET,
                timeout=settings.BLOB_REQUEST_TIMEOUT,
            )
        return self._cloudinary

    def _local_path(self, public_id: str) -> Path:
        path = (self.base_path / public_id).resolve()
        if not path.is_relative_to(self.base_path.resolve()):
            raise ValueError(f"Blob id escapes storage root: {public_id}")
        return path

    async def save(
        self, file_bytes: bytes, original_name: str,
        content_type: Optional[str] = None, folder: str = "",
    ) -> StoredBlob:
        """Save file bytes under ``folder``. Returns where the blob now lives."""
        if self.storage_type == "local":
            public_id = "/".join(
                p for p in (folder, f"{uuid.uuid4()}{Path(original_name).suffix}") if p
            )
            file_path = self._local_path(public_id)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(file_bytes)
            logger.info("Stored %d bytes at %s", len(file_bytes), file_path)
            return StoredBlob(
                url=str(file_path),
                public_id=public_id,
                resource_type=resource_type_for(content_type),
            )

        elif self.storage_type == "cloudinary":
            result = await self.cloudinary.upload(file_bytes, original_name, content_type, folder)
            return StoredBlob(
                url=result["secure_url"],
                public_id=result["public_id"],
                resource_type=result.get("resource_type", "raw"),
            )

        raise ValueError(f"Unknown storage type: {self.storage_type}")

    async def read(self, public_id: str) -> bytes:
        """Read blob bytes by public id. Local storage only; hosted blobs are fetched by url."""
        if self.storage_type == "local":
            async with aiofiles.open(self._local_path(public_id), "rb") as f:
                return await f.read()
        raise ValueError(f"Reading blobs is not supported for storage type: {self.storage_type}")

    async def delete(self, public_id: str, mime_type: Optional[str] = None) -> None:
        """Delete a blob. A blob that is already gone is not an error."""
        if self.storage_type == "local":
            path = self._local_path(public_id)
            if path.exists():
                os.remove(path)
                logger.info("Deleted blob %s", public_id)
            return

        elif self.storage_type == "cloudinary":
            await self.cloudinary.destroy(public_id, resource_type_for(mime_type))
            return

        raise ValueError(f"Unknown storage type: {self.storage_type}")


file_storage = FileStorageService()


def get_file_storage() -> FileStorageService:
    """FastAPI dependency returning the process-wide storage service."""
    return file_storage
