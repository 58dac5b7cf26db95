# This project was developed with assistance from AI tools.
"""PostgreSQL-backed fixtures (docker required; run with ``-m integration``).

One container per test run, migrated with alembic exactly as a deployment
would be. Each test runs inside an outer transaction that is rolled back
afterwards; service commits only release savepoints.
"""

import os

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from testcontainers.postgres import PostgresContainer

pytestmark = pytest.mark.integration

DB_PACKAGE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "..", "db"))


@pytest.fixture(scope="session")
def postgres_urls():
    """(asyncpg URL, psycopg2 URL) for a throwaway postgres:16."""
    with PostgresContainer("postgres:16", username="test", password="test", dbname="leasedesk") as pg:
        address = f"test:test@{pg.get_container_host_ip()}:{pg.get_exposed_port(5432)}/leasedesk"
        yield f"postgresql+asyncpg://{address}", f"postgresql://{address}"


@pytest.fixture(scope="session")
def async_engine(postgres_urls):
    from alembic import command
    from alembic.config import Config

    async_url, sync_url = postgres_urls
    cfg = Config(os.path.join(DB_PACKAGE_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(DB_PACKAGE_DIR, "alembic"))
    cfg.set_main_option("sqlalchemy.url", sync_url)
    command.upgrade(cfg, "head")

    return create_async_engine(async_url, poolclass=NullPool)


@pytest.fixture(scope="session", autouse=True)
def _point_db_module_at_container(async_engine):
    """``get_db_service`` reads ``db.database.db_service`` at call time."""
    import db.database as database

    database.engine = async_engine
    database.SessionLocal = async_sessionmaker(bind=async_engine, expire_on_commit=False)
    database.db_service = database.DatabaseService(engine=async_engine)


@pytest_asyncio.fixture
async def db_session(async_engine):
    async with async_engine.connect() as conn:
        outer = await conn.begin()
        session = AsyncSession(bind=conn, join_transaction_mode="create_savepoint", expire_on_commit=False)
        try:
            yield session
        finally:
            await session.close()
            await outer.rollback()


@pytest.fixture
def client_factory(db_session):
    """``await client_factory(user)`` -> AsyncClient on the real app and container."""
    from db import get_db

    from src.main import app
    from src.middleware.auth import get_current_user

    async def _make(user):
        async def _as_user():
            return user

        async def _session():
            yield db_session

        app.dependency_overrides[get_current_user] = _as_user
        app.dependency_overrides[get_db] = _session
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app, raise_app_exceptions=False),
            base_url="http://test",
        )

    yield _make
    app.dependency_overrides.clear()
