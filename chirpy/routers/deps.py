"""Helpers shared by the routers: service lookup on app.state, auth, error bodies."""
from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from chirpy.core.tokens import bearer_token
from chirpy.services.auth_service import AuthService, TokenInvalidError
from chirpy.services.chirp_service import ChirpService
from chirpy.services.webhook_service import WebhookService


def _state(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured")
    return value


def get_auth_service(request: Request) -> AuthService:
    return _state(request, "auth_service")


def get_chirp_service(request: Request) -> ChirpService:
    return _state(request, "chirp_service")


def get_webhook_service(request: Request) -> WebhookService:
    return _state(request, "webhook_service")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def current_user_id(request: Request) -> int:
    """Resolve the user id from the Bearer access token; raises TokenInvalidError."""
    token = bearer_token(request.headers.get("authorization"))
    return get_auth_service(request).authenticate(token)


__all__ = [
    "TokenInvalidError",
    "current_user_id",
    "error_response",
    "get_auth_service",
    "get_chirp_service",
    "get_webhook_service",
]
