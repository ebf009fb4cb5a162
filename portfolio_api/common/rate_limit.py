# portfolio_api/common/rate_limit.py

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict

from fastapi import Request
from fastapi.responses import JSONResponse
from limits import RateLimitItem, parse
from slowapi import Limiter
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from portfolio_api.common.utils.global_messages import GlobalMessages


@dataclass
class _Window:
    started_at: float
    count: int = 0


class RateLimiter:
    """
    Fixed-window counter per client key.

    The window for a key opens on its first request and is reset on the first
    request after it has elapsed. State lives in memory only, so it is lost on
    restart. A lock guards the map so the limiter can be shared between
    threads as well as coroutines.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._last_pruned = clock()

    def check(self, key: str) -> bool:
        """Record a request for `key` and return True if it is allowed."""
        now = self._clock()
        with self._lock:
            if now - self._last_pruned > self.window_seconds:
                self._prune_expired(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at > self.window_seconds:
                window = _Window(started_at=now)
                self._windows[key] = window
            window.count += 1
            return window.count <= self.max_requests

    def _prune_expired(self, now: float) -> None:
        # Caller holds the lock.
        expired = [
            key for key, window in self._windows.items()
            if now - window.started_at > self.window_seconds
        ]
        for key in expired:
            del self._windows[key]
        self._last_pruned = now


def client_address(request: Request, trusted_hops: int) -> str:
    """
    Derive the client address, trusting `trusted_hops` proxies.

    Each trusted proxy appends the address it received the request from to
    X-Forwarded-For, so the client is the `trusted_hops`-th entry from the
    right. With no trusted proxies the socket peer is used.
    """
    peer = request.client.host if request.client else "unknown"
    if trusted_hops <= 0:
        return peer
    forwarded = request.headers.get("x-forwarded-for")
    if not forwarded:
        return peer
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    if not hops:
        return peer
    index = max(len(hops) - trusted_hops, 0)
    return hops[index]


def create_api_limiter(trusted_hops: int, enabled: bool = True) -> Limiter:
    """Build the slowapi limiter backing the general API quota."""

    def key_func(request: Request) -> str:
        return client_address(request, trusted_hops)

    # In-memory storage (resets on restart).
    # For production with multiple workers, switch to Redis:
    #   Limiter(..., storage_uri="redis://localhost:6379")
    return Limiter(key_func=key_func, enabled=enabled)


def rate_limit_exceeded_response() -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": GlobalMessages.API_RATE_LIMITED},
    )


class ApiQuotaMiddleware(BaseHTTPMiddleware):
    """
    One quota per client shared by every path under `prefix`.

    Counted against a single scope instead of per route, so it applies the
    same way to router-mounted endpoints, inline ones and unknown paths.
    """

    def __init__(
        self,
        app,
        limiter: Limiter,
        limit: int,
        window_seconds: int,
        trusted_hops: int,
        prefix: str = "/api",
        scope: str = "api",
    ):
        super().__init__(app)
        self.limiter = limiter
        self.item: RateLimitItem = parse(f"{limit} per {window_seconds} seconds")
        self.trusted_hops = trusted_hops
        self.prefix = prefix
        self.scope = scope

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.limiter.enabled or not request.url.path.startswith(self.prefix):
            return await call_next(request)

        key = client_address(request, self.trusted_hops)
        if not self.limiter.limiter.hit(self.item, key, self.scope):
            return rate_limit_exceeded_response()
        return await call_next(request)
