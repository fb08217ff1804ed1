"""
FastAPI application entry point.
Challenge: Mount routes, middleware (Prometheus), error handlers, startup events (ES index).
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from app.config import get_settings
from app.api.v1.router import api_router
from app.core.errors import register_error_handlers
from app.core.logging_config import configure_logging
from app.search.elasticsearch_client import close_elasticsearch, ensure_items_index

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure the Elasticsearch index when that backend is used. Shutdown: close client."""
    settings = get_settings()
    if settings.search_backend == "elasticsearch":
        try:
            await ensure_items_index()
        except Exception as e:
            # ES may be down at boot; searches fail with 500 until it is back
            logger.warning("Could not ensure items index at startup: %s", e)
    yield
    await close_elasticsearch()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Community marketplace item discovery: full-text, filters, geo radius, sorting, pagination.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS for frontend/API consumers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
