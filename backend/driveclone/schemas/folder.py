"""Folder request/response schemas."""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator
from driveclone.schemas.base import CamelModel, CamelORMModel, Envelope


class FolderCreate(CamelModel):
    # Validated by the folder service so the error text matches the rest of the API
    name: Optional[str] = None
    parent_id: Optional[str] = None


class FolderUpdate(CamelModel):
    name: Optional[str] = None


class FolderResponse(CamelORMModel):
    id: uuid.UUID
    name: str
    parent_id: Optional[uuid.UUID] = None
    user_id: str
    path: list[str] = []
    created_at: datetime
    updated_at: datetime

    @field_validator("path", mode="before")
    @classmethod
    def none_to_list(cls, v):
        return v if v is not None else []


class PathItem(BaseModel):
    id: str
    name: str


class FolderDetail(BaseModel):
    folder: FolderResponse
    path: list[PathItem]


class FolderEnvelope(Envelope):
    data: FolderResponse
    message: Optional[str] = None


class FolderListEnvelope(Envelope):
    data: list[FolderResponse]


class FolderDetailEnvelope(Envelope):
    data: FolderDetail


class FolderPathEnvelope(Envelope):
    path: list[PathItem]
