"""Shared Pydantic schemas."""
from typing import Optional
from pydantic import BaseModel
from driveclone.schemas.base import Envelope


class MessageResponse(Envelope):
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    status: str
    database: str
    detail: Optional[str] = None
