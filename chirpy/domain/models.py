"""Plain records mirroring the JSON document layout."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping


@dataclass(frozen=True)
class Chirp:
    id: int
    body: str
    author_id: int

    def to_dict(self) -> dict:
        return {"id": self.id, "body": self.body, "author_id": self.author_id}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Chirp":
        return cls(id=int(data["id"]), body=str(data["body"]), author_id=int(data["author_id"]))


@dataclass(frozen=True)
class User:
    id: int
    email: str
    password: str
    is_chirpy_red: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "password": self.password,
            "is_chirpy_red": self.is_chirpy_red,
        }

    def public_dict(self) -> dict:
        """Representation safe to return to clients (no password hash)."""
        return {"id": self.id, "email": self.email, "is_chirpy_red": self.is_chirpy_red}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        is_chirpy_red = data.get("is_chirpy_red", False)
        if not isinstance(is_chirpy_red, bool):
            raise ValueError(f"is_chirpy_red must be a boolean, got {is_chirpy_red!r}")
        return cls(
            id=int(data["id"]),
            email=str(data["email"]),
            password=str(data["password"]),
            is_chirpy_red=is_chirpy_red,
        )


@dataclass
class Document:
    """The single persisted root object. Mutable; lives for one load/save cycle."""

    chirps: dict[int, Chirp] = field(default_factory=dict)
    users: dict[int, User] = field(default_factory=dict)
    revoked_tokens: dict[str, datetime] = field(default_factory=dict)
    next_ids: dict[str, int] = field(default_factory=dict)

    def allocate_id(self, collection: str) -> int:
        """Hand out the next id for ``collection``; ids of deleted records are never reused."""
        existing: Mapping[int, Any] = getattr(self, collection)
        floor = max(existing, default=0) + 1
        new_id = max(self.next_ids.get(collection, 1), floor)
        self.next_ids[collection] = new_id + 1
        return new_id

    def to_dict(self) -> dict:
        return {
            "chirps": {str(k): v.to_dict() for k, v in self.chirps.items()},
            "users": {str(k): v.to_dict() for k, v in self.users.items()},
            "revoked_tokens": {k: v.astimezone(timezone.utc).isoformat() for k, v in self.revoked_tokens.items()},
            "next_ids": dict(self.next_ids),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Document":
        chirps = {int(k): Chirp.from_dict(v) for k, v in (data.get("chirps") or {}).items()}
        users = {int(k): User.from_dict(v) for k, v in (data.get("users") or {}).items()}
        revoked = {}
        for token, stamp in (data.get("revoked_tokens") or {}).items():
            parsed = datetime.fromisoformat(str(stamp).replace("Z", "+00:00"))
            revoked[token] = parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
        next_ids = {str(k): int(v) for k, v in (data.get("next_ids") or {}).items()}
        return cls(chirps=chirps, users=users, revoked_tokens=revoked, next_ids=next_ids)
