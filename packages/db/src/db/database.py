# This project was developed with assistance from AI tools.
"""Async engine, session factory, and FastAPI session dependencies."""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .config import db_settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def _engine_kwargs(url: str) -> dict:
    # SQLite (tests, local demos) does not accept pool sizing arguments.
    if url.startswith("sqlite"):
        return {"echo": db_settings.SQL_ECHO}
    return {
        "echo": db_settings.SQL_ECHO,
        "pool_pre_ping": True,
        "pool_size": db_settings.POOL_SIZE,
        "max_overflow": db_settings.POOL_MAX_OVERFLOW,
    }


engine = create_async_engine(db_settings.DATABASE_URL, **_engine_kwargs(db_settings.DATABASE_URL))

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async with SessionLocal() as session:
        yield session


class DatabaseService:
    """Thin wrapper used by the health endpoint."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def health_check(self) -> dict:
        """Run a trivial query and report the backend in use."""
        backend = self.engine.dialect.name
        label = "PostgreSQL" if backend == "postgresql" else backend.capitalize()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as exc:
            logger.warning("Database health check failed: %s", exc)
            return {"healthy": False, "message": f"{label} unreachable: {exc}"}
        return {"healthy": True, "message": f"{label} connection OK"}


db_service = DatabaseService(engine=engine)


async def get_db_service() -> DatabaseService:
    """FastAPI dependency returning the module-level DatabaseService."""
    return db_service
