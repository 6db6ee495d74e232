"""
MedGloss Middleware Package

Contains:
- request_timing: Per-endpoint latency tracking and slow request logging
"""

from medgloss.middleware.request_timing import (
    RequestTimingMiddleware,
    get_request_stats,
    reset_stats,
)

__all__ = [
    "RequestTimingMiddleware",
    "get_request_stats",
    "reset_stats",
]
