"""
Rolling-window request limiters used as FastAPI dependencies.

Counters live in process memory and are keyed by client address, so limits
apply per worker process.
"""

import time
import threading
from collections import deque

from fastapi import HTTPException, Request
from refugeeconnect.database.config.config import settings


class RateLimiter:
    """
    Allow at most `limit` requests per `window_seconds` for each client.

    Args:
        limit (int): Requests allowed inside one window.
        window_seconds (int): Window length.
        message (str): Error text returned with the 429 response.
    """

    def __init__(self, limit: int, window_seconds: int, message: str):
        self.limit = limit
        self.window_seconds = window_seconds
        self.message = message
        self._hits: dict[str, deque] = {}
        self._lock = threading.Lock()
        self._last_sweep = time.monotonic()

    def _prune(self, hits: deque, now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        # drop clients with no hits left in the window
        for key in list(self._hits):
            self._prune(self._hits[key], now)
            if not self._hits[key]:
                del self._hits[key]
        self._last_sweep = now

    def hit(self, key: str) -> bool:
        """Record one request for `key`; False when it exceeds the limit."""
        now = time.monotonic()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            self._prune(hits, now)
            if len(hits) >= self.limit:
                return False
            hits.append(now)
            return True

    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()

    def __call__(self, request: Request) -> None:
        key = request.client.host if request.client else "anonymous"
        if not self.hit(key):
            raise HTTPException(status_code=429, detail=self.message)


ai_limiter = RateLimiter(
    settings.AI_RATE_LIMIT,
    settings.AI_RATE_WINDOW_SECONDS,
    "Too many AI requests, please wait before asking again.",
)

api_limiter = RateLimiter(
    settings.API_RATE_LIMIT,
    settings.API_RATE_WINDOW_SECONDS,
    "Too many requests, please try again later.",
)
