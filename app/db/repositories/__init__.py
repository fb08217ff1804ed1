# Repository pattern: abstract data access (SOLID - Dependency Inversion)

from app.db.repositories.item_repository import ItemRepository

__all__ = ["ItemRepository"]
