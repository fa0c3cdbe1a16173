"""Auth API routes: sign-up, sign-in and the current user."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.database import get_db
from driveclone.dependencies import get_current_user_id
from driveclone.schemas.auth import (
    SignupRequest, SignupResponse, LoginRequest, LoginEnvelope, UserEnvelope,
)
from driveclone.services import auth as auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=SignupResponse, status_code=201)
async def signup(
    body: SignupRequest,
    db: AsyncSession = Depends(get_db),
):
    """Register a user with email and password."""
    user = await auth_service.signup(
        db, body.name, body.email, body.password, body.confirm_password,
    )
    return {"message": "User created successfully", "user_id": user.id}


@router.post("/login", response_model=LoginEnvelope)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange credentials for a bearer token."""
    user = await auth_service.authenticate(db, body.email, body.password)
    token = auth_service.create_access_token(str(user.id))
    return {
        "success": True,
        "data": {"access_token": token, "token_type": "bearer", "user_id": user.id},
    }


@router.get("/me", response_model=UserEnvelope)
async def me(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.get_user(db, user_id)
    return {
        "success": True,
        "data": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "created_at": user.created_at,
        },
    }
