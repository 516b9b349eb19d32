"""Async helper wrappers for the sync order store."""
from __future__ import annotations

from typing import Any, Callable, TypeVar

import anyio

T = TypeVar("T")

# Enrichment fans out several calls per order; keep the pool bounded.
DEFAULT_MAX_THREADS = 16


class AsyncDBProxy:
    """Proxy that runs sync store calls in a bounded thread pool."""

    def __init__(self, db: Any, *, max_threads: int = DEFAULT_MAX_THREADS):
        self._db = db
        self._max_threads = max_threads
        self._limiter: anyio.CapacityLimiter | None = None

    @property
    def sync(self) -> Any:
        """Expose underlying sync store (use sparingly)."""
        return self._db

    def _get_limiter(self) -> anyio.CapacityLimiter:
        # Created lazily: a limiter needs a running event loop.
        if self._limiter is None:
            self._limiter = anyio.CapacityLimiter(self._max_threads)
        return self._limiter

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run a sync callable in a worker thread."""
        return await anyio.to_thread.run_sync(
            lambda: func(*args, **kwargs), limiter=self._get_limiter()
        )

    def __getattr__(self, name: str):
        attr = getattr(self._db, name)
        if not callable(attr):
            return attr

        async def _call(*args: Any, **kwargs: Any):
            return await self.run(attr, *args, **kwargs)

        return _call
