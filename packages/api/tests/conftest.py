# This project was developed with assistance from AI tools.
"""Shared fixtures: in-memory SQLite database and an ASGI client factory.

Every test gets a fresh schema on an aiosqlite engine. The listing read
cache and the notification dispatcher are module singletons, so they are
reset around every test.
"""

import httpx
import pytest
import pytest_asyncio
from db import Base
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.services.cache import listing_cache
from src.services.notifications import LoggingNotificationDispatcher, set_dispatcher

from .factories import make_listing


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session


@pytest.fixture(autouse=True)
def _reset_shared_state():
    listing_cache.clear()
    yield
    listing_cache.clear()
    set_dispatcher(LoggingNotificationDispatcher())


@pytest_asyncio.fixture
async def listing(db_session):
    """A California listing owned by the landlord persona."""
    return await make_listing(db_session)


@pytest.fixture
def client_factory(db_session):
    """Factory returning an async httpx client with dependency overrides."""
    from db import get_db

    from src.main import app
    from src.middleware.auth import get_current_user

    async def _make(user):
        async def _get_db():
            yield db_session

        async def _get_current_user():
            return user

        app.dependency_overrides[get_db] = _get_db
        app.dependency_overrides[get_current_user] = _get_current_user
        transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    yield _make

    app.dependency_overrides.clear()
