"""Error kinds raised by the persistence layer."""


class StoreError(Exception):
    """Base class for persistence errors."""


class StorageIOError(StoreError):
    """The backing file could not be created, read or written."""


class MalformedStoreError(StoreError):
    """The backing file does not contain a valid document."""


class NotFoundError(StoreError):
    """The requested record does not exist."""


class ConflictError(StoreError):
    """The write would violate a uniqueness rule."""
