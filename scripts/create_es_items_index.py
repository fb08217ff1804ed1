#!/usr/bin/env python3
"""
Create the Elasticsearch items index with raw HTTP (no Python ES client).
Use this when the index keeps returning 503 no_shard_available even after --reset-index:
  python scripts/create_es_items_index.py

Then reindex WITHOUT --reset-index:
  python scripts/reindex_elasticsearch.py

Reads ELASTICSEARCH_URL and ELASTICSEARCH_ITEMS_INDEX from .env.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx
from app.config import get_settings
from app.search.elasticsearch_client import items_index_mappings, items_index_settings


def main():
    settings = get_settings()
    index = settings.elasticsearch_items_index
    base = settings.elasticsearch_url.rstrip("/")
    url = f"{base}/{index}"
    body = {"settings": items_index_settings(), "mappings": items_index_mappings()}

    with httpx.Client(timeout=30.0, verify=settings.elasticsearch_verify_certs) as client:
        r = client.head(url)
        if r.status_code == 200:
            print(f"Index '{index}' already exists. Delete it first if you want to recreate:")
            print(f"  curl -X DELETE '{base}/{index}'")
            return
        r = client.put(url, json=body)
        if r.status_code not in (200, 201):
            print(f"Failed to create index: {r.status_code}")
            print(r.text[:500])
            sys.exit(1)
    print(f"Created index '{index}' with text, keyword and geo_point mappings.")
    print("Run: python scripts/reindex_elasticsearch.py   (no --reset-index)")


if __name__ == "__main__":
    main()
