"""
Celery application - background (re)indexing of items into Elasticsearch.
Challenge: Keep bulk indexing off the request path; retries, time limits.
Design: RabbitMQ broker; Redis as result backend.
"""

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "item_discovery",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.queue.tasks"],
)

# Task settings: retries, time limits, serialization
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_time_limit=1800,  # Full reindex of a large catalogue
    task_soft_time_limit=1500,
    worker_prefetch_multiplier=1,  # Fair distribution
)
