# session/generation_state.py
"""Best-effort generation status records keyed by page path.

Records expire after a TTL. ``try_begin`` is an atomic compare-and-swap on
the status field, so within one process at most one run per path is ever
``in_progress``. Nothing here is shared across processes.
"""
from __future__ import annotations
import asyncio
import time
from typing import Callable, Dict, Optional, Tuple

from pagegen.core.logging import get_logger
from pagegen.schemas.state import GenerationState

logger = get_logger("pagegen.session.generation_state")


class GenerationStateStore:
    def __init__(self, ttl_secs: int = 300, complete_ttl_secs: int = 86_400, clock: Callable[[], float] = time.time):
        self.ttl_secs = ttl_secs
        self.complete_ttl_secs = complete_ttl_secs
        self._clock = clock
        self._records: Dict[str, GenerationState] = {}
        self._lock = asyncio.Lock()

    def _live(self, path: str) -> Optional[GenerationState]:
        rec = self._records.get(path)
        if rec is None:
            return None
        if rec.expires_at and rec.expires_at <= self._clock():
            self._records.pop(path, None)
            return None
        return rec

    async def get(self, path: str) -> Optional[GenerationState]:
        async with self._lock:
            return self._live(path)

    async def try_begin(self, path: str, query: str, slug: str) -> Tuple[bool, GenerationState]:
        """Claim ``path`` for a new run unless one is already in flight."""
        async with self._lock:
            current = self._live(path)
            if current is not None and current.status == "in_progress":
                logger.info("GEN_STATE_BUSY path=%s slug=%s", path, current.slug)
                return False, current
            now = self._clock()
            rec = GenerationState(
                status="in_progress",
                query=query,
                slug=slug,
                path=path,
                created_at=now,
                expires_at=now + self.ttl_secs,
            )
            self._records[path] = rec
            logger.info("GEN_STATE_BEGIN path=%s slug=%s", path, slug)
            return True, rec

    async def _finish(self, path: str, **update) -> Optional[GenerationState]:
        async with self._lock:
            current = self._records.get(path)
            if current is None:
                logger.warning("GEN_STATE_MISSING path=%s status=%s", path, update.get("status"))
                return None
            rec = current.model_copy(update=update)
            self._records[path] = rec
            logger.info("GEN_STATE_%s path=%s", str(rec.status).upper(), path)
            return rec

    async def mark_complete(self, path: str, page_url: str) -> Optional[GenerationState]:
        now = self._clock()
        return await self._finish(
            path, status="complete", completed_at=now, page_url=page_url, expires_at=now + self.complete_ttl_secs
        )

    async def mark_failed(self, path: str, error: str) -> Optional[GenerationState]:
        now = self._clock()
        return await self._finish(path, status="failed", completed_at=now, error=error, expires_at=now + self.ttl_secs)

    async def clear(self) -> None:
        async with self._lock:
            self._records.clear()
