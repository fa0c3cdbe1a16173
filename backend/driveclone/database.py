"""Async SQLAlchemy engine and session factory.

The engine is created once per process and disposed by the app lifespan.
Each request gets its own session through the ``get_db`` dependency, and the
services take that session as their first argument:

    @router.get("/folders")
    async def list_folders(db: AsyncSession = Depends(get_db)):
        return await folder_service.list_folders(db, user_id)
"""
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from driveclone.config import settings


def _engine_options(url: str) -> dict:
    # SQLite (local dev) picks its own pool class and rejects sizing arguments
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": 10, "max_overflow": 20, "pool_pre_ping": True}


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    **_engine_options(settings.DATABASE_URL),
)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db():
    """FastAPI dependency that yields an async DB session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
