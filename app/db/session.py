"""
Async database session management.
Challenge: Connection pooling, request-scoped sessions, proper cleanup.
Design: Discovery only reads, so request sessions roll back instead of committing.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.config import get_settings

settings = get_settings()


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Pooled engine for server databases; SQLite gets the driver defaults."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo)
    return create_async_engine(
        url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before use
        pool_size=10,
        max_overflow=20,
    )


engine = build_engine(settings.database_url, echo=settings.debug)

# Session factory: one session per request
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a read session per request; always rolled back and closed on exit."""
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


# Type alias for FastAPI dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
