"""Credential store and session tokens.

Passwords are bcrypt hashes; sessions are stateless HS256 JWTs whose ``sub``
claim carries the user id that every folder and file query is scoped by.
"""
import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from driveclone.config import settings
from driveclone.exceptions import NotFoundError, UnauthorizedError, ValidationError
from driveclone.models.user import User
from driveclone.services.ids import parse_id

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def _hash_password_sync(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password_sync(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


async def hash_password(password: str) -> str:
    return await asyncio.to_thread(_hash_password_sync, password)


async def verify_password(password: str, hashed: str) -> bool:
    return await asyncio.to_thread(_verify_password_sync, password, hashed)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"sub": str(user_id), "exp": expire}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by ``token`` or raise UnauthorizedError."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise UnauthorizedError()
    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError()
    return user_id


def _validate_signup(name, email, password, confirm_password) -> None:
    if not name or not email or not password or not confirm_password:
        raise ValidationError("All fields are required")
    if password != confirm_password:
        raise ValidationError("Passwords do not match")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")


async def signup(
    db: AsyncSession,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    confirm_password: Optional[str],
) -> User:
    """Create a user. Emails are compared and stored lower-cased."""
    _validate_signup(name, email, password, confirm_password)
    email = email.lower()

    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise ValidationError("User already exists with this email")

    user = User(
        name=name,
        email=email,
        hashed_password=await hash_password(password),
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ValidationError("User already exists with this email")
    await db.refresh(user)
    logger.info("Created user %s", user.id)
    return user


async def authenticate(db: AsyncSession, email: Optional[str], password: Optional[str]) -> User:
    """Check credentials. Unknown email and wrong password fail the same way."""
    if not email or not password:
        raise ValidationError("Email and password are required")

    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if not user or not await verify_password(password, user.hashed_password):
        raise UnauthorizedError("Invalid email or password")
    return user


async def get_user(db: AsyncSession, user_id: str) -> User:
    try:
        uid = parse_id(user_id, "User not found")
    except NotFoundError:
        raise UnauthorizedError()
    result = await db.execute(select(User).where(User.id == uid))
    user = result.scalar_one_or_none()
    if not user:
        raise UnauthorizedError()
    return user
