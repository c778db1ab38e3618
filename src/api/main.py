"""
Stockroom HTTP application.

``create_app`` builds the FastAPI instance; the module-level ``app`` is what
uvicorn serves. The lifespan migrates the database before the first request
and closes the connection pool on shutdown.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from src.api.middleware.error_handler import setup_exception_handlers
from src.api.routes import health_router, items_router, stock_router
from src.config import Settings, configure_logging, get_logger, get_settings
from src.infrastructure.storage.sqlite import close_pool, get_pool
from src.infrastructure.storage.sqlite.migrations import initialize_database

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging()
    db_path = settings.storage.db_path

    applied = await initialize_database(db_path)
    pool = await get_pool()
    logger.info(
        "stockroom_started",
        db_path=str(db_path),
        migrations_applied=[f"v{r.version}" for r in applied],
        pool_size=pool.pool_size,
        environment=settings.environment,
    )

    try:
        yield
    finally:
        await close_pool()
        logger.info("stockroom_stopped")


def _add_service_routes(app: FastAPI, settings: Settings) -> None:
    title = app.title

    @app.get("/health", include_in_schema=False)
    async def liveness() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    @app.get("/", include_in_schema=False)
    async def index() -> dict[str, str | None]:
        return {"name": title, "version": settings.app_version, "docs": app.docs_url}


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    docs_enabled = settings.api.debug or settings.is_development

    app = FastAPI(
        title=f"{settings.app_name} Inventory API",
        description=(
            "Record goods received and issued, reconcile counted quantities in bulk "
            "or from a spreadsheet, and browse the movement history."
        ),
        version=settings.app_version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Added last runs first: CORS wraps error handling wraps request logging.
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    setup_exception_handlers(app)
    for router in (health_router, items_router, stock_router):
        app.include_router(router)
    _add_service_routes(app, settings)
    return app


app = create_app()
