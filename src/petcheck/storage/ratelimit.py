"""
Sliding-window rate limiter backed by the key-value store.
"""

import time
from typing import Callable

from petcheck.core.exceptions import RateLimitExceededError
from petcheck.storage.store import KeyValueStore


class RateLimiter:
    """
    Allows at most `limit` hits per identity within `window_seconds`.

    Hit timestamps are kept under `ratelimit/<scope>/<identity>` in the store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        limit: int,
        window_seconds: float,
        scope: str = "default",
        clock: Callable[[], float] = time.time,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self.scope = scope
        self._clock = clock

    def _key(self, identity: str) -> str:
        return f"ratelimit/{self.scope}/{identity}"

    def _recent_hits(self, identity: str, now: float) -> list[float]:
        cutoff = now - self.window_seconds
        return [t for t in self.store.get(self._key(identity), []) if t > cutoff]

    def remaining(self, identity: str) -> int:
        """Hits still allowed in the current window."""
        return max(0, self.limit - len(self._recent_hits(identity, self._clock())))

    def hit(self, identity: str) -> None:
        """Record a hit.

        Raises:
            RateLimitExceededError: If the identity already used its quota.
        """
        now = self._clock()
        hits = self._recent_hits(identity, now)
        if len(hits) >= self.limit:
            retry_after = hits[0] + self.window_seconds - now
            raise RateLimitExceededError(retry_after=max(0.0, retry_after), limit=self.limit)
        hits.append(now)
        self.store.set(self._key(identity), hits)

    def reset(self, identity: str) -> None:
        self.store.delete(self._key(identity))
