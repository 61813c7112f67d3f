from __future__ import annotations

from typing import Optional
import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from chirpy.core.config import PACKAGE_DIR, ConfigurationError, Settings, get_settings
from chirpy.core.metrics import FileserverHitsMiddleware, FileserverMetrics
from chirpy.repositories.errors import MalformedStoreError, StorageIOError
from chirpy.repositories.json_repository import JSONRepository
from chirpy.repositories.json_storage import JSONStorage
from chirpy.routers import admin as admin_router
from chirpy.routers import chirps as chirps_router
from chirpy.routers import hooks as hooks_router
from chirpy.routers import users as users_router
from chirpy.services.auth_service import AuthService
from chirpy.services.chirp_service import ChirpService
from chirpy.services.webhook_service import WebhookService

logger = logging.getLogger(__name__)


async def _storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": "Something went wrong"}, status_code=500)


def create_app(settings: Optional[Settings] = None, *, reset_database: Optional[bool] = None) -> FastAPI:
    """Build the API around a single JSONStorage opened at startup."""
    settings = settings or get_settings()
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET must be set to sign access and refresh tokens")
    reset = settings.reset_database if reset_database is None else reset_database

    storage = JSONStorage.open(settings.database_path, reset=reset)
    repository = JSONRepository(storage)
    metrics = FileserverMetrics()

    app = FastAPI(title="Chirpy API")
    app.state.settings = settings
    app.state.repository = repository
    app.state.metrics = metrics
    app.state.auth_service = AuthService(repository=repository, settings=settings)
    app.state.chirp_service = ChirpService(repository)
    app.state.webhook_service = WebhookService(repository, settings.polka_key)
    app.state.templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))

    app.add_exception_handler(StorageIOError, _storage_error_handler)
    app.add_exception_handler(MalformedStoreError, _storage_error_handler)

    app.add_middleware(FileserverHitsMiddleware, metrics=metrics, prefix="/app")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.get("/api/healthz", response_class=PlainTextResponse)
    def healthz():
        return "OK"

    app.include_router(users_router.router)
    app.include_router(chirps_router.router)
    app.include_router(hooks_router.router)
    app.include_router(admin_router.router)

    if os.path.isdir(settings.filepath_root):
        app.mount("/app", StaticFiles(directory=settings.filepath_root, html=True), name="app")
    else:
        logger.warning("Static root %s does not exist; /app is disabled", settings.filepath_root)

    return app
