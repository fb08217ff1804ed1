"""
Health checks - for load balancers, Kubernetes, and monitoring.
Challenge: Fast liveness; readiness reports whether the search backend answers.
"""

from fastapi import APIRouter

from app.config import get_settings
from app.search.elasticsearch_client import ping

router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready():
    """Readiness: can accept traffic? Search degrades rather than failing, so this stays 200."""
    backend = settings.search_backend
    if backend == "elasticsearch":
        backend_ok = await ping()
    else:
        backend_ok = True
    return {"status": "ready", "search_backend": backend, "search_backend_ok": backend_ok}
