#!/usr/bin/env python3
"""
Reindex all items from the database into Elasticsearch.
By default the work is enqueued for a Celery worker; --now runs it in this process.

If you get 503 / no_shard_available from Elasticsearch, delete the broken index and reindex:
  python scripts/reindex_elasticsearch.py --reset-index

  python scripts/reindex_elasticsearch.py
  python scripts/reindex_elasticsearch.py --now
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.queue.tasks import reindex_items_task
from app.search.elasticsearch_client import ITEMS_INDEX, _sync_es_client


def delete_items_index():
    """Delete the items index so it is recreated with the current mapping."""
    es = _sync_es_client()
    if es.indices.exists(index=ITEMS_INDEX):
        es.indices.delete(index=ITEMS_INDEX)
        print(f"Deleted index '{ITEMS_INDEX}'. It will be recreated by the reindex.")
    else:
        print(f"Index '{ITEMS_INDEX}' does not exist (already deleted or never created).")


def main():
    ap = argparse.ArgumentParser(description="Reindex all items into Elasticsearch")
    ap.add_argument("--reset-index", action="store_true", help="Delete the items index first (fixes 503 / no_shard_available, mapping changes)")
    ap.add_argument("--now", action="store_true", help="Run in this process instead of enqueueing for Celery")
    args = ap.parse_args()

    if args.reset_index:
        delete_items_index()
        print()

    if args.now:
        total = reindex_items_task.apply().get()
        print(f"Indexed {total} items into '{ITEMS_INDEX}'.")
        return

    result = reindex_items_task.delay()
    print(f"Enqueued reindex task {result.id}. Ensure a Celery worker is running.")
    print(f"Then check: curl -s 'http://localhost:9200/{ITEMS_INDEX}/_count?pretty'")


if __name__ == "__main__":
    main()
