"""
Celery tasks - keep the Elasticsearch items index in sync with the database.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.config import get_settings
from app.db.repositories.item_repository import ItemRepository
from app.db.session import build_engine
from app.queue.celery_app import celery_app
from app.search.documents import item_to_doc
from app.search.elasticsearch_client import (
    _sync_es_client,
    ensure_items_index_sync,
    index_documents_sync,
    remove_item_sync,
)

logger = logging.getLogger(__name__)

REINDEX_BATCH_SIZE = 500


def _run_async(coro):
    """Run async function from sync Celery task."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@asynccontextmanager
async def _task_session():
    """Fresh engine per task run; pooled connections cannot outlive their event loop."""
    engine = build_engine(get_settings().database_url)
    try:
        async with async_sessionmaker(engine, expire_on_commit=False)() as session:
            yield session
    finally:
        await engine.dispose()


async def _load_item_doc(item_id: int) -> dict | None:
    async with _task_session() as session:
        item = await ItemRepository(session).get_by_id_with_owner(item_id)
        return item_to_doc(item) if item else None


async def _reindex_all(es) -> int:
    total = 0
    async with _task_session() as session:
        async for batch in ItemRepository(session).iter_with_owner(REINDEX_BATCH_SIZE):
            total += index_documents_sync([item_to_doc(item) for item in batch], es=es)
    return total


@celery_app.task(bind=True, max_retries=3)
def index_item_task(self, item_id: int):
    """Index (or drop, if it no longer exists) one item after it changed in the database."""
    try:
        es = _sync_es_client()
        ensure_items_index_sync(es)
        doc = _run_async(_load_item_doc(item_id))
        if doc is None:
            remove_item_sync(item_id, es=es)
            return "removed"
        if index_documents_sync([doc], es=es) != 1:
            raise RuntimeError(f"Index failed for item {item_id}")
        return "indexed"
    except Exception as exc:
        raise self.retry(exc=exc, countdown=5)


@celery_app.task(bind=True, max_retries=3)
def reindex_items_task(self):
    """Bulk copy every item (with owner) from the database into the items index."""
    try:
        es = _sync_es_client()
        ensure_items_index_sync(es)
        total = _run_async(_reindex_all(es))
        logger.info("Reindexed %d items", total)
        return total
    except Exception as exc:
        raise self.retry(exc=exc, countdown=5)
