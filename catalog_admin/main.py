"""Catalog admin API main application module.

This module builds the FastAPI application and configures core
middleware, routers, exception handlers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_admin.api.auth import router as auth_router
from catalog_admin.api.categories import router as categories_router
from catalog_admin.api.health import router as health_router
from catalog_admin.api.hero_slides import router as hero_slides_router
from catalog_admin.api.media import router as media_router
from catalog_admin.api.middleware import setup_middleware
from catalog_admin.api.products import router as products_router
from catalog_admin.api.schemas import ErrorResponse
from catalog_admin.application import AuthService
from catalog_admin.domain.exceptions import CatalogError
from catalog_admin.infrastructure.config import Settings, settings as default_settings
from catalog_admin.infrastructure.database import Database
from catalog_admin.infrastructure.logging import configure_logging
from catalog_admin.infrastructure.media import CloudinaryMediaResolver
from catalog_admin.infrastructure.sql_store import SqlCatalogStore

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    logger.info(
        "Starting catalog admin API",
        version=settings.api_version,
        debug=settings.debug,
        numeric_coercion=settings.numeric_coercion.value,
        require_admin_auth=settings.require_admin_auth,
    )

    if settings.create_tables_on_startup:
        await database.create_tables()

    if settings.seed_default_admin:
        async with database.session() as session:
            await AuthService(SqlCatalogStore(session), settings).ensure_default_admin()

    if not app.state.media.configured:
        logger.warning("Media host credentials missing; image uploads will fail")

    yield

    logger.info("Shutting down catalog admin API")
    await app.state.media.close()
    await database.dispose()


# ============================================================================
# Exception Handlers
# ============================================================================


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    details: object = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the standard error envelope; details are shown in debug mode only."""
    debug = request.app.state.settings.debug
    body = ErrorResponse(error=error, details=details if debug else None)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body.model_dump(exclude_none=True)),
        headers=headers,
    )


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Map domain errors to their HTTP status."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        error_type=type(exc).__name__,
        error=exc.message,
        path=request.url.path,
        method=request.method,
    )
    return _error_response(request, exc.status_code, exc.message, exc.details)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400."""
    return _error_response(request, 400, "Invalid request", exc.errors())


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    error = str(exc.detail)
    if exc.status_code == 404 and error == "Not Found":
        error = "API route not found" if request.url.path.startswith("/api") else "Not found"
    return _error_response(request, exc.status_code, error, headers=exc.headers)


# ============================================================================
# Application Factory
# ============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to use; defaults to the environment-loaded instance.

    Returns:
        Configured application. The database engine and media client are
        created here but connect lazily.
    """
    settings = settings or default_settings
    configure_logging(settings.log_level, json_logs=settings.log_json)

    app = FastAPI(
        title="Catalog Admin API",
        description="Product catalog administration backend",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.database = Database(settings.database_url)
    app.state.media = CloudinaryMediaResolver.from_settings(settings)

    # CORS middleware (must be added before custom middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Setup custom middleware (request ID, error handling)
    setup_middleware(app)

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Include routers
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(categories_router)
    app.include_router(products_router)
    app.include_router(hero_slides_router)
    app.include_router(media_router)

    return app


app = create_app()
