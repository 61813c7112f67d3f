"""Typed accessors for chirps, users and revoked tokens over JSONStorage."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional
import logging

from chirpy.domain.models import Chirp, User
from chirpy.repositories.errors import ConflictError, NotFoundError
from chirpy.repositories.json_storage import JSONStorage

logger = logging.getLogger(__name__)


class JSONRepository:
    """CRUD helpers wrapping one JSONStorage. Holds no state between calls."""

    def __init__(self, storage: JSONStorage) -> None:
        self.storage = storage

    # -------------------------- chirps --------------------------
    def create_chirp(self, body: str, author_id: int) -> Chirp:
        with self.storage.transaction() as doc:
            chirp = Chirp(id=doc.allocate_id("chirps"), body=body, author_id=author_id)
            doc.chirps[chirp.id] = chirp
        logger.debug("Created chirp %s for author %s", chirp.id, author_id)
        return chirp

    def list_chirps(self) -> list[Chirp]:
        with self.storage.snapshot() as doc:
            return sorted(doc.chirps.values(), key=lambda c: c.id)

    def get_chirp(self, chirp_id: int) -> Chirp:
        with self.storage.snapshot() as doc:
            chirp = doc.chirps.get(chirp_id)
        if chirp is None:
            raise NotFoundError(f"chirp {chirp_id} not found")
        return chirp

    def delete_chirp(self, chirp_id: int) -> None:
        with self.storage.transaction() as doc:
            if chirp_id not in doc.chirps:
                raise NotFoundError(f"chirp {chirp_id} not found")
            del doc.chirps[chirp_id]
        logger.debug("Deleted chirp %s", chirp_id)

    # -------------------------- users --------------------------
    def create_user(self, email: str, hashed_password: str) -> User:
        with self.storage.transaction() as doc:
            if self._email_owner(doc.users.values(), email) is not None:
                raise ConflictError("a user with this email already exists")
            user = User(id=doc.allocate_id("users"), email=email, password=hashed_password)
            doc.users[user.id] = user
        logger.debug("Created user %s", user.id)
        return user

    def list_users(self) -> list[User]:
        with self.storage.snapshot() as doc:
            return sorted(doc.users.values(), key=lambda u: u.id)

    def get_user(self, user_id: int) -> User:
        with self.storage.snapshot() as doc:
            user = doc.users.get(user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        return user

    def get_user_by_email(self, email: str) -> User:
        with self.storage.snapshot() as doc:
            user = self._email_owner(doc.users.values(), email)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def update_user(
        self,
        user_id: int,
        email: str,
        hashed_password: str,
        is_chirpy_red: Optional[bool] = None,
    ) -> User:
        """Replace a user's credentials. ``is_chirpy_red=None`` keeps the current flag."""
        with self.storage.transaction() as doc:
            current = doc.users.get(user_id)
            if current is None:
                raise NotFoundError(f"user {user_id} not found")
            owner = self._email_owner(doc.users.values(), email)
            if owner is not None and owner.id != user_id:
                raise ConflictError("a user with this email already exists")
            user = User(
                id=user_id,
                email=email,
                password=hashed_password,
                is_chirpy_red=current.is_chirpy_red if is_chirpy_red is None else is_chirpy_red,
            )
            doc.users[user_id] = user
        return user

    def upgrade_user(self, user_id: int) -> User:
        with self.storage.transaction() as doc:
            current = doc.users.get(user_id)
            if current is None:
                raise NotFoundError(f"user {user_id} not found")
            user = replace(current, is_chirpy_red=True)
            doc.users[user_id] = user
        logger.info("User %s upgraded to Chirpy Red", user_id)
        return user

    @staticmethod
    def _email_owner(users, email: str) -> Optional[User]:
        for user in users:
            if user.email == email:
                return user
        return None

    # -------------------------- revoked tokens --------------------------
    def list_revoked_tokens(self) -> dict[str, datetime]:
        with self.storage.snapshot() as doc:
            return dict(doc.revoked_tokens)

    def revoke_token(self, token: str) -> None:
        with self.storage.transaction() as doc:
            doc.revoked_tokens[token] = datetime.now(timezone.utc)

    def is_token_revoked(self, token: str) -> bool:
        with self.storage.snapshot() as doc:
            return token in doc.revoked_tokens
