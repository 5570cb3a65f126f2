from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from filmcatalog.common.logging import get_logger
from filmcatalog.common.settings import get_settings
from filmcatalog.database.core.main import create_schema
from filmcatalog.services.api.deps import get_mailer
from filmcatalog.services.api.errors import register_error_handlers
from filmcatalog.services.api.routers import films, health
from filmcatalog.services.graphql.schema import create_graphql_router

cfg = get_settings()
dev = cfg.app_env.lower() == "development"
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if dev:
        # no migrations in dev: build the tables straight from the models
        create_schema()
    yield
    mailer = get_mailer()
    if mailer is not None and hasattr(mailer, "close"):
        mailer.close(wait=False)
    get_mailer.cache_clear()


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="Filmcatalog API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
        lifespan=lifespan if with_lifespan else None,
    )

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
        expose_headers=["ETag", "Location"],
    )

    register_error_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(films.router)
    app.include_router(create_graphql_router(), prefix=cfg.graphql.path)

    logger.debug("create_app: env=%s graphql=%s", cfg.app_env, cfg.graphql.path)
    return app


app = create_app()
