"""
Request Timing Middleware for MedGloss

Tracks API endpoint latency:
- Request duration by endpoint (rolling window)
- Slow request logging
- X-Response-Time header on every monitored response
"""

import logging
import os
import time
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD_SECONDS = float(os.getenv("SLOW_REQUEST_THRESHOLD_SECONDS", "3.0"))

UNMONITORED_PATHS = {"/health", "/", "/docs", "/openapi.json", "/redoc"}

# Stats key for requests no route matched (404 scans)
UNMATCHED_ROUTE = "<unmatched>"


class RequestStats:
    """Rolling per-endpoint request durations."""

    def __init__(self, window_minutes: int = 60):
        # {endpoint: [(timestamp, duration), ...]}
        self._requests: Dict[str, List[tuple]] = defaultdict(list)
        self._window_seconds = window_minutes * 60

    def _clean_old_requests(self, endpoint: str):
        cutoff_time = time.time() - self._window_seconds
        recent = [
            (ts, dur) for ts, dur in self._requests.get(endpoint, [])
            if ts > cutoff_time
        ]
        if recent:
            self._requests[endpoint] = recent
        else:
            self._requests.pop(endpoint, None)

    def record_request(self, endpoint: str, duration: float):
        self._clean_old_requests(endpoint)
        self._requests[endpoint].append((time.time(), duration))

    def get_stats(self, endpoint: Optional[str] = None) -> Dict:
        """
        Get latency statistics for one endpoint, or all endpoints when
        endpoint is None.
        """
        if endpoint is None:
            stats = {ep: self.get_stats(ep) for ep in list(self._requests.keys())}
            return {ep: s for ep, s in stats.items() if s["count"]}

        self._clean_old_requests(endpoint)
        durations = sorted(dur for _, dur in self._requests.get(endpoint, []))

        if not durations:
            return {"endpoint": endpoint, "count": 0, "avg_ms": 0, "max_ms": 0, "p95_ms": 0}

        p95_index = min(int(len(durations) * 0.95), len(durations) - 1)
        return {
            "endpoint": endpoint,
            "count": len(durations),
            "avg_ms": round(sum(durations) / len(durations) * 1000, 2),
            "max_ms": round(durations[-1] * 1000, 2),
            "p95_ms": round(durations[p95_index] * 1000, 2),
        }


def route_template(request: Request) -> str:
    """Path template of the matched route, so /term/mi and /term/copd share one key."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


# Global request stats instance
_request_stats = RequestStats(window_minutes=60)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Time every API request and log the slow ones."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in UNMONITORED_PATHS:
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        endpoint = f"{request.method} {route_template(request)}"
        _request_stats.record_request(endpoint, duration)

        response.headers["X-Response-Time"] = f"{duration * 1000:.2f}ms"

        if duration > SLOW_REQUEST_THRESHOLD_SECONDS:
            logger.warning(f"Slow request detected: {endpoint} took {duration:.2f}s")

        return response


def get_request_stats(endpoint: Optional[str] = None) -> Dict:
    return _request_stats.get_stats(endpoint)


def reset_stats():
    global _request_stats
    _request_stats = RequestStats(window_minutes=60)
