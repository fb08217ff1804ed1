"""
Base repository - generic async data access (SOLID: Interface Segregation, Dependency Inversion).
Challenge: Consistent data access, testability, driver errors mapped in one place.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import SearchBackendError
from app.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses define model-specific queries."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def _execute(self, statement: Any):
        """Run a statement; driver and pool failures become SearchBackendError."""
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as exc:
            raise SearchBackendError(f"{self.model.__name__} query failed: {exc}") from exc
