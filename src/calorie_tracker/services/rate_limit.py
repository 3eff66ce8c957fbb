"""Sliding-window request limiter for expensive endpoints."""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from time import monotonic


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a rate limit check."""

    allowed: bool
    current_requests: int
    limit: int
    retry_after_seconds: int | None = None


@dataclass
class SlidingWindowRateLimiter:
    """In-memory per-key limiter over a sliding time window.

    State lives in process memory, so limits are per worker.
    """

    max_requests: int
    window_seconds: float
    clock: Callable[[], float] = monotonic
    _requests: dict[str, list[float]] = field(default_factory=dict)
    _last_cleanup: float | None = None

    def check(self, key: str) -> RateLimitResult:
        """Return whether another request is allowed, pruning old entries.

        Idle keys of all users are swept at most once per window.
        """
        now = self.clock()
        last = self._last_cleanup
        if last is None or now - last >= self.window_seconds:
            self.cleanup(now)
        recent = self._recent(key, now)
        allowed = len(recent) < self.max_requests
        retry_after = None
        if not allowed and recent:
            wait = min(recent) + self.window_seconds - now
            retry_after = max(1, math.ceil(wait))
        return RateLimitResult(
            allowed=allowed,
            current_requests=len(recent),
            limit=self.max_requests,
            retry_after_seconds=retry_after,
        )

    def hit(self, key: str) -> None:
        """Record a request for a key."""
        self._requests.setdefault(key, []).append(self.clock())

    def reset(self, key: str) -> None:
        self._requests.pop(key, None)

    def cleanup(self, now: float | None = None) -> None:
        """Drop every key with no request inside the window."""
        now = self.clock() if now is None else now
        window_start = now - self.window_seconds
        idle = [
            key
            for key, stamps in self._requests.items()
            if max(stamps) <= window_start
        ]
        for key in idle:
            del self._requests[key]
        self._last_cleanup = now

    def _recent(self, key: str, now: float) -> list[float]:
        window_start = now - self.window_seconds
        recent = [
            stamp for stamp in self._requests.get(key, []) if stamp > window_start
        ]
        if recent:
            self._requests[key] = recent
        else:
            self._requests.pop(key, None)
        return recent
