"""Per-browser dashboard state kept in memory between requests."""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from ..constants import ActiveTab
from .compose_service import CreatePostModal
from .feed_service import FeedController
from .preview_service import ObjectUrlRegistry

logger = logging.getLogger(__name__)


@dataclass
class DashboardSession:
    """UI state for one browser: the feed, the compose modal, and chrome toggles."""

    feed: FeedController
    compose: CreatePostModal
    previews: ObjectUrlRegistry
    is_sidebar_open: bool = False
    active_tab: ActiveTab = "home"
    alert: str | None = None
    last_seen: float = field(default_factory=time.monotonic)

    @classmethod
    def create(cls, client: httpx.AsyncClient, *, user_city: str, token: str | None = None) -> "DashboardSession":
        previews = ObjectUrlRegistry()
        return cls(
            feed=FeedController(client, user_city=user_city, token=token),
            compose=CreatePostModal(user_city=user_city, previews=previews),
            previews=previews,
        )

    def dismiss_alert(self) -> None:
        self.alert = None

    def close(self) -> int:
        """Release every preview still held by this session."""

        return self.previews.revoke_all()


class SessionStore:
    """Maps session cookies onto ``DashboardSession`` objects, evicting idle ones."""

    def __init__(self, *, idle_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._sessions: dict[str, DashboardSession] = {}
        self._lock = asyncio.Lock()
        self._idle_seconds = idle_seconds
        self._clock = clock

    def __len__(self) -> int:
        return len(self._sessions)

    async def get(self, session_id: str) -> DashboardSession | None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                session.last_seen = self._clock()
            return session

    async def get_or_create(
        self,
        session_id: str,
        factory: Callable[[], DashboardSession],
    ) -> DashboardSession:
        async with self._lock:
            self._evict_idle_locked()
            session = self._sessions.get(session_id)
            if session is None:
                session = factory()
                self._sessions[session_id] = session
            session.last_seen = self._clock()
            return session

    async def discard(self, session_id: str) -> None:
        async with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()

    async def evict_idle(self) -> int:
        async with self._lock:
            return self._evict_idle_locked()

    async def clear(self) -> None:
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.close()

    def _evict_idle_locked(self) -> int:
        cutoff = self._clock() - self._idle_seconds
        expired = [key for key, session in self._sessions.items() if session.last_seen < cutoff]
        for key in expired:
            released = self._sessions.pop(key).close()
            logger.info("Evicted idle dashboard session (released %d previews)", released)
        return len(expired)


__all__ = ["DashboardSession", "SessionStore"]
