"""Client-side pacing for requests that end up hitting the Google Sheets API.

Sheets allows a limited number of reads per 100 seconds per user, so every
fetch and mutation issued by the dashboard waits here first. Two limits apply:
a minimum gap between consecutive requests, and a maximum number of requests
inside a sliding window.
"""
import asyncio
import logging
import math
import os
import time
from collections import deque

logger = logging.getLogger(__name__)

DEFAULT_MIN_DELAY = 0.2
DEFAULT_WINDOW = 100.0
DEFAULT_MAX_REQUESTS = 50
DEFAULT_BUFFER = 1.0


class RateLimiter:
    """Sliding-window limiter with a minimum inter-request delay.

    All durations are in seconds. ``clock`` must be monotonic; ``sleep`` must be
    an awaitable sleep compatible with :func:`asyncio.sleep`. Both exist so tests
    can drive time by hand.
    """

    def __init__(
        self,
        min_delay=DEFAULT_MIN_DELAY,
        window=DEFAULT_WINDOW,
        max_requests=DEFAULT_MAX_REQUESTS,
        buffer=DEFAULT_BUFFER,
        clock=time.monotonic,
        sleep=asyncio.sleep,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        self.min_delay = float(min_delay)
        self.window = float(window)
        self.max_requests = int(max_requests)
        self.buffer = float(buffer)
        self._clock = clock
        self._sleep = sleep
        self._timestamps = deque()
        self._lock = None
        self._lock_loop = None

    @classmethod
    def from_env(cls, **overrides):
        def _env_seconds(name, default):
            raw = os.getenv(name)
            if not raw:
                return default
            try:
                return float(raw) / 1000.0
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", name, raw)
                return default

        config = {
            "min_delay": _env_seconds("RATE_LIMIT_MIN_DELAY_MS", DEFAULT_MIN_DELAY),
            "window": _env_seconds("RATE_LIMIT_WINDOW_MS", DEFAULT_WINDOW),
            "max_requests": int(os.getenv("RATE_LIMIT_MAX_REQUESTS") or DEFAULT_MAX_REQUESTS),
        }
        config.update(overrides)
        return cls(**config)

    @property
    def timestamps(self):
        return list(self._timestamps)

    def _prune(self, now):
        while self._timestamps and now - self._timestamps[0] >= self.window:
            self._timestamps.popleft()

    def _get_lock(self):
        # Streamlit reruns each interaction under a fresh event loop.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def wait_for_rate_limit(self):
        """Return once it is safe to issue the next request, recording its timestamp."""
        async with self._get_lock():
            now = self._clock()
            self._prune(now)

            if len(self._timestamps) >= self.max_requests:
                oldest = self._timestamps[0]
                wait = self.window - (now - oldest) + self.buffer
                if wait > 0:
                    logger.info("Rate limit: waiting %ss before next request", math.ceil(wait))
                    await self._sleep(wait)
                now = self._clock()
                self._prune(now)

            if self._timestamps:
                since_last = now - self._timestamps[-1]
                if since_last < self.min_delay:
                    await self._sleep(self.min_delay - since_last)

            self._timestamps.append(self._clock())

    def reset(self):
        self._timestamps.clear()

    def current_request_count(self):
        self._prune(self._clock())
        return len(self._timestamps)

