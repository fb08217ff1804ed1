"""
FastAPI dependencies - item store and discovery engine injection (SOLID: Dependency Inversion).
Challenge: Pick the store from configuration; tests override get_item_store or get_db.
"""

from typing import Annotated

from fastapi import Depends

from app.config import get_settings
from app.db.repositories.item_repository import ItemRepository
from app.db.session import DbSession
from app.search.elasticsearch_client import ITEMS_INDEX, get_elasticsearch
from app.search.elasticsearch_store import ElasticsearchItemStore
from app.search.engine import DiscoveryEngine
from app.search.executor import ItemStore

_es_store: ElasticsearchItemStore | None = None


async def _get_es_store() -> ElasticsearchItemStore:
    # Shared so the text-index mapping check is cached across requests
    global _es_store
    if _es_store is None:
        _es_store = ElasticsearchItemStore(await get_elasticsearch(), ITEMS_INDEX)
    return _es_store


async def get_item_store(session: DbSession) -> ItemStore:
    """Store for the configured backend. The DB session is only used by the database backend."""
    if get_settings().search_backend == "database":
        return ItemRepository(session)
    return await _get_es_store()


async def get_discovery_engine(
    store: Annotated[ItemStore, Depends(get_item_store)],
) -> DiscoveryEngine:
    return DiscoveryEngine(store, get_settings().search_config())


Engine = Annotated[DiscoveryEngine, Depends(get_discovery_engine)]
