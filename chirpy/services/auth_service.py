"""
Authentication and identity related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging

from chirpy.core.config import Settings
from chirpy.core.security import hash_password, needs_rehash, verify_password
from chirpy.core.tokens import (
    ACCESS_ISSUER,
    REFRESH_ISSUER,
    TokenError,
    decode_token,
    issue_access_token,
    issue_refresh_token,
)
from chirpy.domain.models import User
from chirpy.repositories.errors import ConflictError, NotFoundError
from chirpy.repositories.json_repository import JSONRepository

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class RegistrationError(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class TokenInvalidError(AuthError):
    pass


@dataclass
class LoginResult:
    user: User
    token: str
    refresh_token: str


@dataclass
class AuthService:
    """Handles registration, login, credential updates and refresh-token flows."""

    repository: JSONRepository
    settings: Settings

    # -------------------------------------- helpers --------------------------------------
    def _validate(self, email: str, password: str) -> str:
        raw_email = (email or "").strip()
        if not raw_email:
            raise RegistrationError("Email is required")
        if not password:
            raise RegistrationError("Password is required")
        return raw_email

    def authenticate(self, access_token: Optional[str]) -> int:
        """Return the user id of a valid access token."""
        if not access_token:
            raise TokenInvalidError("Missing token")
        try:
            return decode_token(access_token, self.settings, issuer=ACCESS_ISSUER)
        except TokenError as exc:
            raise TokenInvalidError(str(exc)) from exc

    # -------------------------------------- registration --------------------------------------
    def register(self, email: str, password: str) -> User:
        raw_email = self._validate(email, password)
        try:
            user = self.repository.create_user(raw_email, hash_password(password))
        except ConflictError as exc:
            raise AccountExistsError("A user with this email already exists") from exc
        logger.info("Registered user %s", user.id)
        return user

    def update_credentials(self, user_id: int, email: str, password: str) -> User:
        raw_email = self._validate(email, password)
        try:
            return self.repository.update_user(user_id, raw_email, hash_password(password))
        except ConflictError as exc:
            raise AccountExistsError("A user with this email already exists") from exc

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str, expires_in_seconds: Optional[int] = None) -> LoginResult:
        raw_email = (email or "").strip()
        if not raw_email:
            raise InvalidCredentialsError("Incorrect email or password")
        try:
            user = self.repository.get_user_by_email(raw_email)
        except NotFoundError:
            user = None
        if not user or not verify_password(password, user.password):
            logger.warning("Failed login attempt")
            raise InvalidCredentialsError("Incorrect email or password")
        if needs_rehash(user.password):
            user = self.repository.update_user(user.id, user.email, hash_password(password))

        token = issue_access_token(user.id, self.settings, expires_in_seconds)
        refresh_token = issue_refresh_token(user.id, self.settings)
        return LoginResult(user=user, token=token, refresh_token=refresh_token)

    # -------------------------------------- refresh tokens --------------------------------------
    def refresh(self, refresh_token: Optional[str]) -> str:
        if not refresh_token:
            raise TokenInvalidError("Missing token")
        if self.repository.is_token_revoked(refresh_token):
            raise TokenInvalidError("Token has been revoked")
        try:
            user_id = decode_token(refresh_token, self.settings, issuer=REFRESH_ISSUER)
        except TokenError as exc:
            raise TokenInvalidError(str(exc)) from exc
        return issue_access_token(user_id, self.settings)

    def revoke(self, refresh_token: Optional[str]) -> None:
        if not refresh_token:
            raise TokenInvalidError("Missing token")
        try:
            decode_token(refresh_token, self.settings, issuer=REFRESH_ISSUER)
        except TokenError as exc:
            raise TokenInvalidError(str(exc)) from exc
        self.repository.revoke_token(refresh_token)
