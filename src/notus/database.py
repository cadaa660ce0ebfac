"""Async engine and per-request sessions."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings
from .core.models.base import BaseModel


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, connect_args={"check_same_thread": False})
    # pooled connections are pinged before reuse
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


settings = get_settings()

engine = build_engine(settings.database_url, settings.database_echo)

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session():
    """FastAPI dependency: one session per request, rolled back if the handler raised."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables(bind: Optional[AsyncEngine] = None) -> None:
    """Create missing tables. Deployed databases are migrated with alembic instead."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def dispose_engine() -> None:
    await engine.dispose()
