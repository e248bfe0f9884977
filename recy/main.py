"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handling (one ErrorResponder behind every handler)
- Security middleware (headers, rate limiting)
- Logging configuration (once at startup, flushed at shutdown)
- Per-application resources (record store, minting client) on `app.state`

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from recy.core.config import Settings, settings
from recy.infrastructure.audit.in_memory import InMemoryRecordStore
from recy.infrastructure.audit.minting_adapter import Web3MintingAdapter
from recy.infrastructure.database import build_engine, create_schema
from recy.interfaces.audit.router import router as audit_router
from recy.interfaces.health import router as health_router
from recy.shared.errors.handlers import register_error_handlers
from recy.shared.errors.responder import ErrorResponder
from recy.shared.logging import configure_logging, flush_logging
from recy.shared.security.headers import SecurityHeadersMiddleware
from recy.shared.security.rate_limiting import configure_limiter

logger = logging.getLogger(__name__)

ERROR_LOGGER_NAME = "recy.errors"


def _install_resources(app: FastAPI, app_settings: Settings) -> None:
    """Build the record store and minting client the providers hand out."""
    app.state.settings = app_settings
    app.state.db_engine = None
    app.state.memory_store = None
    if app_settings.storage_backend == "memory":
        app.state.memory_store = InMemoryRecordStore()
    else:
        # Engines connect lazily; nothing touches the database here.
        app.state.db_engine = build_engine(app_settings.get_database_dsn())
    app.state.minting_adapter = Web3MintingAdapter(
        base_url=app_settings.web3_service_url,
        timeout=app_settings.web3_timeout_seconds,
    )


def _lifespan(app_settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan: bootstrap storage, release clients on shutdown."""
        if app_settings.auto_create_schema and app.state.db_engine is not None:
            create_schema(app.state.db_engine)
        logger.info("%s %s started", app_settings.project_name, app_settings.version)

        yield

        app.state.minting_adapter.close()
        if app.state.db_engine is not None:
            app.state.db_engine.dispose()
        logger.info("%s stopped", app_settings.project_name)
        flush_logging()

    return lifespan


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Args:
        app_settings: Settings to build the application with. Storage,
            minting, health and rate limits all follow them.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=app_settings.log_level, fmt=app_settings.log_format)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=_lifespan(app_settings),
    )
    _install_resources(app, app_settings)

    # --- Rate Limiting ---
    app.state.limiter = configure_limiter(app_settings)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handling ---
    responder = ErrorResponder(logger=logging.getLogger(ERROR_LOGGER_NAME))
    app.state.error_responder = responder
    register_error_handlers(app, responder)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(audit_router, prefix="/api/v1")

    return app


app = create_app()
