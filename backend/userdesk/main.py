"""UserDesk API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map UserDeskError → structured JSON responses
    - CORS resolved from settings (Settings.cors_policy), not hardcoded here
    - Database initialized on startup and disposed on shutdown via lifespan
    - The /api catch-all is registered after every API router and before the
      SPA mount, so unknown API paths never fall through to index.html

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app(settings) factory: tests build apps with their own settings
    - OpenAPI served at /api/docs.json and Swagger UI at /api/docs
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from userdesk.api.error_handlers import register_error_handlers
from userdesk.api.routes import health, service_info, users
from userdesk.config import Settings, get_settings
from userdesk.infrastructure.database import init_db, close_db
from userdesk.infrastructure.observability import setup_logging, log_requests
from userdesk.infrastructure.spa import build_spa_app

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "X-Admin-Token"]


def _lifespan_for(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        manager = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_create_tables:
            await manager.create_tables()
        logger.info(f"UserDesk API started ({settings.environment})")
        yield
        await close_db()
        logger.info("UserDesk API shutting down")

    return lifespan


def _add_cors(app: FastAPI, settings: Settings) -> None:
    origins, allow_all = settings.cors_policy()
    if allow_all:
        logger.warning("ALLOWED_ORIGINS is empty; CORS reflects every origin")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_origin_regex=".*" if allow_all else None,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Users API",
        version="1.0.0",
        description="API documentation for the Users Management System",
        lifespan=_lifespan_for(settings),
        docs_url="/api/docs",
        openapi_url="/api/docs.json",
        redoc_url=None,
    )
    app.state.settings = settings

    app.middleware("http")(log_requests)
    _add_cors(app, settings)
    register_error_handlers(app)

    # Routes: explicit registration, catch-all last
    app.include_router(service_info.router)
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(service_info.catch_all_router)

    # Static files: React build, every unknown non-API path gets index.html
    spa = build_spa_app(settings.static_dir)
    if spa is not None:
        app.mount("/", spa, name="static")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "userdesk.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
