"""Search response schemas."""
from typing import Literal
from pydantic import BaseModel
from driveclone.schemas.base import Envelope
from driveclone.schemas.folder import FolderResponse
from driveclone.schemas.file import FileResponse


class FolderHit(FolderResponse):
    kind: Literal["folder"] = "folder"


class FileHit(FileResponse):
    kind: Literal["file"] = "file"


class SearchResults(BaseModel):
    folders: list[FolderHit]
    files: list[FileHit]


class SearchEnvelope(Envelope):
    data: SearchResults
