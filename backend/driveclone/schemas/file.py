"""File request/response schemas."""
import uuid
from typing import Optional, Union
from datetime import datetime
from driveclone.schemas.base import CamelModel, CamelORMModel, Envelope


class FileCreate(CamelModel):
    # Presence is checked by the file service, not by pydantic
    name: Optional[str] = None
    original_name: Optional[str] = None
    type: Optional[str] = None
    size: Optional[Union[int, str]] = None
    folder_id: Optional[str] = None
    url: Optional[str] = None
    cloudinary_public_id: Optional[str] = None


class FileUpdate(CamelModel):
    """``folder_id`` is only applied when the client sent it; explicit null moves to root."""
    name: Optional[str] = None
    folder_id: Optional[str] = None


class FileResponse(CamelORMModel):
    id: uuid.UUID
    name: str
    original_name: str
    type: str
    size: int
    folder_id: Optional[uuid.UUID] = None
    user_id: str
    url: str
    cloudinary_public_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class FileEnvelope(Envelope):
    data: FileResponse
    message: Optional[str] = None


class FileListEnvelope(Envelope):
    data: list[FileResponse]


class DeletedBlob(CamelModel):
    cloudinary_public_id: Optional[str] = None


class FileDeleteEnvelope(Envelope):
    message: str
    data: DeletedBlob


class UploadResult(CamelModel):
    url: str
    public_id: str
    original_name: str
    size: int
    type: str


class UploadEnvelope(Envelope):
    data: UploadResult
