"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.api.http.error_handlers import register_error_handlers
from src.bookshelf.api.http.routers.book import router as book_router
from src.bookshelf.api.http.routers.health import router as health_router
from src.bookshelf.api.utils.app_startup import configure_logging
from src.bookshelf.core.services import DbSessionService
from src.bookshelf.core.services.database.db_manage import create_all
from src.bookshelf.entities.book.repository import BookRepository
from src.bookshelf.runtime.config.config_data import ConfigData
from src.bookshelf.runtime.context import get_config


async def startup(app: FastAPI) -> None:
    """Build the shared connection pool and the service on top of it."""
    config: ConfigData = app.state.config
    database_service = DbSessionService(config.database, config.app.environment)
    if config.database.create_tables:
        await create_all(database_service.engine)

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        book_service=BookRepository(database_service.engine),
    )
    logger.info("Application startup complete")


async def shutdown(app: FastAPI) -> None:
    deps: ApplicationDependencies | None = getattr(app.state, "app_dependencies", None)
    if deps is not None:
        await deps.database_service.dispose()
        app.state.app_dependencies = None
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup(app)
    try:
        yield
    finally:
        await shutdown(app)


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    client_ip = request.client.host if request.client else "unknown"

    start = time.perf_counter()
    with logger.contextualize(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
        client_ip=client_ip,
    ):
        logger.info("request.start")
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")

    response.headers.setdefault("X-Request-ID", request_id)
    return response


def create_app(config: ConfigData | None = None) -> FastAPI:
    """Assemble the gateway: middleware, error handlers and routers.

    ``config`` defaults to the active runtime configuration.
    """
    config = config or get_config()
    is_production = config.app.environment == "production"

    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    application = FastAPI(
        title="Bookshelf",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    application.state.config = config
    application.state.app_dependencies = None
    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    application.middleware("http")(log_requests)

    register_error_handlers(application)
    application.include_router(health_router)
    application.include_router(book_router)
    return application


configure_logging()

app = create_app()

__all__ = ["app", "create_app", "startup", "shutdown"]
