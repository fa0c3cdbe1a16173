"""Auth request/response schemas."""
import uuid
from typing import Optional
from datetime import datetime
from driveclone.schemas.base import CamelModel, CamelORMModel, Envelope


class SignupRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class SignupResponse(CamelModel):
    message: str
    user_id: uuid.UUID


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AccessToken(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user_id: uuid.UUID


class LoginEnvelope(Envelope):
    data: AccessToken


class UserResponse(CamelORMModel):
    id: uuid.UUID
    name: str
    email: str
    created_at: datetime


class UserEnvelope(Envelope):
    data: UserResponse
