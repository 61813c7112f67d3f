"""Chirp use cases (post, list, lookup, delete)."""

from __future__ import annotations

from typing import Optional

from chirpy.domain.chirps import validate_body
from chirpy.domain.models import Chirp
from chirpy.repositories.json_repository import JSONRepository

SORT_ORDERS = ("asc", "desc")


class ChirpError(Exception):
    """Base exception for chirp workflow."""


class ForbiddenError(ChirpError):
    """Raised when a user tries to delete someone else's chirp."""


class InvalidSortError(ChirpError):
    """Raised when the requested sort order is not asc/desc."""


class ChirpService:
    def __init__(self, repository: JSONRepository) -> None:
        self.repository = repository

    def post(self, body: str, author_id: int) -> Chirp:
        return self.repository.create_chirp(validate_body(body), author_id)

    def list(self, author_id: Optional[int] = None, sort: str = "asc") -> list[Chirp]:
        order = (sort or "asc").lower()
        if order not in SORT_ORDERS:
            raise InvalidSortError(f"Unknown sort order: {sort}")
        chirps = self.repository.list_chirps()
        if author_id is not None:
            chirps = [c for c in chirps if c.author_id == author_id]
        if order == "desc":
            chirps.reverse()
        return chirps

    def get(self, chirp_id: int) -> Chirp:
        return self.repository.get_chirp(chirp_id)

    def delete(self, chirp_id: int, requester_id: int) -> None:
        chirp = self.repository.get_chirp(chirp_id)
        if chirp.author_id != requester_id:
            raise ForbiddenError("You can only delete your own chirps")
        self.repository.delete_chirp(chirp_id)
