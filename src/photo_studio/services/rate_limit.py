"""Simple rate limiting abstractions."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class RateLimiter(Protocol):
    """Rate limiter interface keyed by client identity."""

    def hit(self, key: str) -> bool:
        """Record a request and return whether it is within the limit."""


@dataclass
class _Window:
    count: int
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryRateLimiter(RateLimiter):
    """Fixed-window limiter kept in process memory."""

    limit: int
    window_seconds: int
    clock: Callable[[], datetime] = _utcnow
    _windows: dict[str, _Window] = field(default_factory=dict)
    _next_sweep: datetime | None = None

    def hit(self, key: str) -> bool:
        """Count a request against the key's current window."""
        now = self.clock()
        self._sweep(now)
        window = self._windows.get(key)
        if window is None or now >= window.expires_at:
            window = _Window(
                count=0, expires_at=now + timedelta(seconds=self.window_seconds)
            )
            self._windows[key] = window
        window.count += 1
        return window.count <= self.limit

    def _sweep(self, now: datetime) -> None:
        """Drop expired windows at most once per window length."""
        if self._next_sweep is not None and now < self._next_sweep:
            return
        self._windows = {
            key: window
            for key, window in self._windows.items()
            if now < window.expires_at
        }
        self._next_sweep = now + timedelta(seconds=self.window_seconds)
