"""Coarse relative timestamps ("3d", "5h", "12m", "now") for feed entries."""
from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

PLACEHOLDER = "..."
REFRESH_INTERVAL_SECONDS = 60.0


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def relative_time_label(value: datetime, now: datetime | None = None) -> str:
    """Return the largest whole unit elapsed since ``value``."""

    current = _as_aware(now or utcnow())
    elapsed_ms = int((current - _as_aware(value)).total_seconds() * 1000)

    minutes = elapsed_ms // 60_000
    hours = elapsed_ms // 3_600_000
    days = elapsed_ms // 86_400_000

    if days > 0:
        return f"{days}d"
    if hours > 0:
        return f"{hours}h"
    if minutes > 0:
        return f"{minutes}m"
    return "now"


class ClientTimeDisplay:
    """Self-refreshing label for a single timestamp.

    Shows ``PLACEHOLDER`` until mounted; ``run`` waits one tick before the
    first real label and then refreshes once per interval.
    """

    def __init__(self, date: datetime, *, clock: Callable[[], datetime] = utcnow) -> None:
        self.date = date
        self._clock = clock
        self.mounted = False
        self.text = ""

    def mount(self) -> None:
        self.mounted = True
        self.update()

    def update(self) -> str:
        self.text = relative_time_label(self.date, self._clock())
        return self.text

    def render(self) -> str:
        return self.text if self.mounted else PLACEHOLDER

    async def run(self, stop: asyncio.Event, *, interval: float = REFRESH_INTERVAL_SECONDS) -> None:
        await asyncio.sleep(0)
        self.mount()
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                self.update()


__all__ = ["ClientTimeDisplay", "PLACEHOLDER", "REFRESH_INTERVAL_SECONDS", "relative_time_label", "utcnow"]
