"""NEEPCO Procurement API — FastAPI application factory."""


import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from procurement.core.config import settings
from procurement.core.exceptions import register_exception_handlers
from procurement.db.base import async_session_factory, engine, init_models
from procurement.middleware.audit import AuditMiddleware
from procurement.routers.v1 import api_routers
from procurement.schemas.common import HealthResponse
from procurement.services.user import UserService

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.is_development else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)


async def _bootstrap_admin() -> None:
    async with async_session_factory() as session:
        await UserService(session).ensure_admin(
            settings.bootstrap_admin_email, settings.bootstrap_admin_password
        )
        await session.commit()
    logger.info("Bootstrap admin %s ready", settings.bootstrap_admin_email)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.db_reset_on_startup or settings.db_auto_create:
        await init_models(reset=settings.db_reset_on_startup)
    if settings.bootstrap_admin_enabled:
        await _bootstrap_admin()
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Audit middleware ---
    app.add_middleware(AuditMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app)

    # --- API routes (/api/*) ---
    for router in api_routers:
        app.include_router(router, prefix="/api")

    # --- Health check ---
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        return HealthResponse(app=settings.app_name, env=settings.app_env)

    return app


app = create_app()
