"""
Error types and JSON error handlers.
Challenge: Store failures surface as a generic 500; optional-input problems never reach here.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SearchBackendError(Exception):
    """The item store could not execute a read (connectivity, query failure)."""


async def search_backend_error_handler(request: Request, exc: SearchBackendError) -> JSONResponse:
    logger.error("Search backend failure on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Error searching items"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Server Error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SearchBackendError, search_backend_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
