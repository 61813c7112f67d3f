"""
Configuration helpers for the Chirpy backend.

Routers and services receive a Settings instance instead of reading
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

PACKAGE_DIR = Path(__file__).resolve().parents[1]


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    port: int
    database_path: str
    reset_database: bool
    jwt_secret: str
    polka_key: str
    filepath_root: str
    access_token_ttl_seconds: int
    refresh_token_ttl_seconds: int
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    origins = tuple(o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        port=_int(os.getenv("PORT", "8080"), 8080),
        database_path=os.getenv("DATABASE_PATH", "database.json"),
        reset_database=_bool(os.getenv("RESET_DATABASE"), False),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        polka_key=os.getenv("POLKA_KEY", ""),
        filepath_root=os.getenv("FILEPATH_ROOT", str(PACKAGE_DIR / "web")),
        access_token_ttl_seconds=_int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "3600"), 3600),
        refresh_token_ttl_seconds=_int(os.getenv("REFRESH_TOKEN_TTL_SECONDS", str(60 * 24 * 3600)), 60 * 24 * 3600),
        cors_origins=origins,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
