"""JWT issuance and verification for access and refresh tokens."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone

import jwt

from .config import Settings

ACCESS_ISSUER = "chirpy-access"
REFRESH_ISSUER = "chirpy-refresh"
ALGORITHM = "HS256"


class TokenError(Exception):
    """Raised when a token is malformed, expired, or signed for another purpose."""


def _issue(subject: int, issuer: str, ttl_seconds: int, secret: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "iss": issuer,
        "sub": str(subject),
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
        "jti": secrets.token_hex(16),
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def issue_access_token(user_id: int, settings: Settings, expires_in_seconds: int | None = None) -> str:
    """Access tokens never outlive the configured TTL; a shorter client request is honoured."""
    ttl = settings.access_token_ttl_seconds
    if expires_in_seconds is not None and 0 < expires_in_seconds < ttl:
        ttl = expires_in_seconds
    return _issue(user_id, ACCESS_ISSUER, ttl, settings.jwt_secret)


def issue_refresh_token(user_id: int, settings: Settings) -> str:
    return _issue(user_id, REFRESH_ISSUER, settings.refresh_token_ttl_seconds, settings.jwt_secret)


def decode_token(token: str, settings: Settings, *, issuer: str) -> int:
    """Return the user id carried by ``token``."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[ALGORITHM],
            issuer=issuer,
            options={"require": ["exp", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError("invalid token") from exc
    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise TokenError("invalid subject") from exc


def bearer_token(authorization: str | None, scheme: str = "Bearer") -> str | None:
    """Extract the credential from an ``Authorization: <scheme> <value>`` header."""
    if not authorization:
        return None
    prefix = f"{scheme} "
    if not authorization.startswith(prefix):
        return None
    value = authorization[len(prefix):].strip()
    return value or None
