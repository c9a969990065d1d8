from __future__ import annotations

import asyncio
import logging
import math
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

DEFAULT_REQUESTS = 120
DEFAULT_WINDOW_SECONDS = 60


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding-window request limit per client address.

    Requests over the limit get a 429 with a ``Retry-After`` header.
    """

    def __init__(
        self,
        app,
        *,
        requests: int = DEFAULT_REQUESTS,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
        key_func: Callable[[Request], str] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.requests = max(1, requests)
        self.window = max(1, window_seconds)
        self.key_func = key_func or self._default_key
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()
        self._last_cleanup = clock()

    @staticmethod
    def _default_key(request: Request) -> str:
        client = request.client
        return client.host if client else "unknown"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        identifier = self.key_func(request)
        now = self._clock()

        async with self._lock:
            self._maybe_cleanup(now)
            timestamps = self._hits[identifier]
            while timestamps and timestamps[0] <= now - self.window:
                timestamps.popleft()

            if len(timestamps) >= self.requests:
                retry_after = max(1, math.ceil(timestamps[0] + self.window - now))
                logger.warning("Rate limit exceeded for %s on %s", identifier, request.url.path)
                return JSONResponse(
                    {"error": "Too many requests. Reduce your request rate and try again."},
                    status_code=429,
                    headers={"Retry-After": str(retry_after)},
                )
            timestamps.append(now)

        return await call_next(request)

    def _maybe_cleanup(self, now: float) -> None:
        """Drop clients that have been idle for a full window."""
        if now - self._last_cleanup < self.window:
            return
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= now - self.window]
        for key in stale:
            del self._hits[key]
        self._last_cleanup = now
