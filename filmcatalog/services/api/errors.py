# filmcatalog/services/api/errors.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from filmcatalog.common.logging import get_logger
from filmcatalog.domain.errors import FilmCatalogError

logger = get_logger(__name__)


def _film_error_handler(request: Request, exc: FilmCatalogError) -> JSONResponse:
    logger.debug("%s %s -> %s: %s", request.method, request.url.path, int(exc.status_code), exc.message)
    return JSONResponse(
        status_code=int(exc.status_code),
        content={
            "statusCode": int(exc.status_code),
            "error": exc.status_code.phrase,
            "message": exc.message,
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Map every domain rejection to its HTTP status in one place."""
    app.add_exception_handler(FilmCatalogError, _film_error_handler)
