"""Shared fixtures: in-memory SQLite store, fake blob storage, HTTP client."""
import os
import tempfile

# Settings are read at import time; point them somewhere harmless first.
os.environ.setdefault("FILE_STORAGE_PATH", tempfile.mkdtemp(prefix="driveclone-test-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from driveclone.database import get_db
from driveclone.main import app
from driveclone.models import Base
from driveclone.services.auth import create_access_token
from driveclone.services.file_storage import StoredBlob, get_file_storage

U1 = "user-one"
U2 = "user-two"


class FakeStorage:
    """Stands in for FileStorageService; remembers blobs in a dict."""

    storage_type = "local"

    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_delete = False
        self.fail_save = False

    async def save(self, file_bytes, original_name, content_type=None, folder=""):
        if self.fail_save:
            raise RuntimeError("blob host unavailable")
        public_id = f"{folder}/{original_name}"
        self.blobs[public_id] = file_bytes
        return StoredBlob(url=f"https://blobs.test/{public_id}", public_id=public_id)

    async def read(self, public_id):
        if public_id not in self.blobs:
            raise FileNotFoundError(public_id)
        return self.blobs[public_id]

    async def delete(self, public_id, mime_type=None):
        if self.fail_delete:
            raise RuntimeError("blob host unavailable")
        self.deleted.append(public_id)
        self.blobs.pop(public_id, None)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
async def client(session_factory, storage):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def u1_headers():
    return auth_headers(U1)


@pytest.fixture
def u2_headers():
    return auth_headers(U2)
