"""
Persistence adapters.

JSONStorage owns the backing file and its lock; JSONRepository layers typed
chirp/user/revocation operations on top. Services depend on the repository
rather than touching the JSON file.
"""

from chirpy.repositories.errors import (
    ConflictError,
    MalformedStoreError,
    NotFoundError,
    StorageIOError,
    StoreError,
)
from chirpy.repositories.json_repository import JSONRepository
from chirpy.repositories.json_storage import JSONStorage

__all__ = [
    "ConflictError",
    "JSONRepository",
    "JSONStorage",
    "MalformedStoreError",
    "NotFoundError",
    "StorageIOError",
    "StoreError",
]
