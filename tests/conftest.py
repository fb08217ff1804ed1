"""
Pytest fixtures - test DB, client, sample catalogue.
Challenge: Isolated tests; no Elasticsearch or PostgreSQL needed.
"""

import os

# Must be set before app.config is first imported (settings are cached)
os.environ.setdefault("SEARCH_BACKEND", "database")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.models import Item, User
from app.db.session import get_db
from app.main import app

# In-memory SQLite shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"

MADRID = (40.4168, -3.7038)
BARCELONA = (41.3874, 2.1686)
BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

# id -> (title, description, category, condition, location, point, enabled, available)
CATALOGUE = [
    ("Python programming book", "Learn Python fast", "books", "good", "Madrid, Spain", MADRID, True, True),
    ("Cookbook", "Mediterranean recipes", "books", "like_new", "Barcelona", BARCELONA, True, True),
    ("Bluetooth headphones", "Noise cancelling", "electronics", "new", "Madrid Centro", (40.4300, -3.7000), True, True),
    ("Desk chair", "Ergonomic, adjustable", "furniture", "fair", "Getafe, Madrid", (40.3057, -3.7329), False, True),
    ("Old python manual", "Second edition", "books", "poor", "Valencia", None, False, False),
    ("Winter coat", "Warm and waterproof", "clothing", "good", "madrid", MADRID, True, True),
]


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as s:
        yield s


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def owner(session: AsyncSession) -> User:
    user = User(email="owner@example.com", full_name="Owner One")
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def catalogue(session: AsyncSession, owner: User) -> list[Item]:
    """Six items created an hour apart (ids 1..6, oldest first)."""
    items = []
    for i, (title, description, category, condition, location, point, enabled, available) in enumerate(
        CATALOGUE, start=1
    ):
        item = Item(
            title=title,
            description=description,
            category=category,
            condition=condition,
            location=location,
            latitude=point[0] if point else None,
            longitude=point[1] if point else None,
            coordinates_enabled=enabled,
            available=available,
            owner_id=owner.id,
            created_at=BASE_TIME + timedelta(hours=i),
            updated_at=BASE_TIME + timedelta(hours=i),
        )
        session.add(item)
        items.append(item)
    await session.flush()
    return items


@pytest.fixture
def ids():
    def _ids(payload: dict) -> list[int]:
        return [doc["id"] for doc in payload["data"]]

    return _ids
