"""
JSON file persistence for the whole Chirpy document.

One JSONStorage owns one file and one reader/writer lock. Every mutation is
a full load -> mutate -> save cycle run under the write lock via
``transaction()``; reads that need a consistent view use ``snapshot()``.
"""

from __future__ import annotations

from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Iterator
import json
import logging
import threading

from chirpy.domain.models import Document
from chirpy.repositories.errors import MalformedStoreError, StorageIOError

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Shared-read / exclusive-write lock. Waiting writers block new readers."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class JSONStorage:
    """File-backed store for the Chirpy document."""

    def __init__(self, path: str | Path, reset: bool = False) -> None:
        self.path = Path(path)
        self._lock = ReadWriteLock()
        with self._lock.write_locked():
            self._ensure(reset)

    @classmethod
    def open(cls, path: str | Path, reset: bool = False) -> "JSONStorage":
        return cls(path, reset=reset)

    def _ensure(self, reset: bool) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if reset:
                self.path.write_bytes(b"")
                logger.info("Reset database at %s", self.path)
            elif not self.path.exists():
                self.path.write_bytes(b"")
                logger.info("Created database at %s", self.path)
        except OSError as exc:
            raise StorageIOError(f"Failed to create {self.path}: {exc}") from exc

    # -------------------------- raw I/O (caller holds the lock) --------------------------
    def _read(self) -> Document:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Failed to read {self.path}: {exc}") from exc
        if not raw.strip():
            return Document()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedStoreError(f"Invalid JSON in {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise MalformedStoreError(f"Expected a JSON object in {self.path}")
        try:
            return Document.from_dict(data)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise MalformedStoreError(f"Unexpected document shape in {self.path}: {exc}") from exc

    def _write(self, document: Document) -> None:
        temp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            temp_path.write_text(json.dumps(document.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as exc:
            if temp_path.is_file():
                with suppress(OSError):
                    temp_path.unlink()
            raise StorageIOError(f"Failed to write {self.path}: {exc}") from exc

    # -------------------------- public API --------------------------
    def load(self) -> Document:
        with self._lock.read_locked():
            return self._read()

    def save(self, document: Document) -> None:
        with self._lock.write_locked():
            self._write(document)

    @contextmanager
    def snapshot(self) -> Iterator[Document]:
        """Yield the document while holding the read lock."""
        with self._lock.read_locked():
            yield self._read()

    @contextmanager
    def transaction(self) -> Iterator[Document]:
        """Yield a mutable document under the write lock; saved only if the block succeeds."""
        with self._lock.write_locked():
            document = self._read()
            yield document
            self._write(document)
