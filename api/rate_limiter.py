"""
In-memory sliding-window rate limiting.

One limiter per budget (general API, recipe creation, chat). Clients are
keyed by user id when authenticated, otherwise by IP address. State lives in
the process, so limits apply per worker.
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, Tuple

from app.config import settings

logger = logging.getLogger("mealprep.ratelimit")


class RateLimiter:
    """Allows ``limit`` requests per ``window_sec`` for each key."""

    def __init__(self, name: str, limit: int, window_sec: float, clock: Callable[[], float] = time.monotonic):
        self.name = name
        self.limit = limit
        self.window_sec = window_sec
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def hit(self, key: str) -> Tuple[bool, int, int]:
        """
        Record a request for ``key``.

        Returns:
            (allowed, remaining, retry_after_seconds)
        """
        with self._lock:
            now = self._clock()
            cutoff = now - self.window_sec
            self._maybe_cleanup(now, cutoff)
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()

            if len(hits) >= self.limit:
                retry_after = max(1, int(hits[0] + self.window_sec - now + 0.999))
                logger.warning(f"rate_limited limiter={self.name} key={key} retry_after={retry_after}")
                return False, 0, retry_after

            hits.append(now)
            return True, self.limit - len(hits), 0

    def active_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def _maybe_cleanup(self, now: float, cutoff: float) -> None:
        """Drop keys with no hits left in the window, at most once per window."""
        if now - self._last_cleanup < self.window_sec:
            return
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if not hits:
                del self._hits[key]
        self._last_cleanup = now
        logger.debug(f"rate_limit_cleanup limiter={self.name} active_keys={len(self._hits)}")

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._last_cleanup = self._clock()


api_limiter = RateLimiter("api", settings.rate_limit_api, settings.rate_limit_window_sec)
recipe_create_limiter = RateLimiter(
    "recipe_create", settings.rate_limit_recipe_create, settings.rate_limit_window_sec
)
chat_limiter = RateLimiter("chat", settings.rate_limit_chat, settings.rate_limit_window_sec)


def reset_all() -> None:
    for limiter in (api_limiter, recipe_create_limiter, chat_limiter):
        limiter.reset()
