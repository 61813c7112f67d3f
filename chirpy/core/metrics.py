from __future__ import annotations

import threading

from starlette.middleware.base import BaseHTTPMiddleware


class FileserverMetrics:
    """Thread-safe counter of requests served from the static /app mount."""

    def __init__(self) -> None:
        self._hits = 0
        self._lock = threading.Lock()

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    def increment(self) -> int:
        with self._lock:
            self._hits += 1
            return self._hits

    def reset(self) -> None:
        with self._lock:
            self._hits = 0


class FileserverHitsMiddleware(BaseHTTPMiddleware):
    """Count every request whose path falls under ``prefix``."""

    def __init__(self, app, *, metrics: FileserverMetrics, prefix: str = "/app") -> None:
        super().__init__(app)
        self._metrics = metrics
        self._prefix = prefix.rstrip("/")

    async def dispatch(self, request, call_next):
        path = request.url.path
        if path == self._prefix or path.startswith(self._prefix + "/"):
            self._metrics.increment()
        return await call_next(request)
