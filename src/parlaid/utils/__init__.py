"""Utility modules for Parlaid."""

from parlaid.utils.rate_limiter import RateLimiter, RateLimitState, now_ms

__all__ = [
    "RateLimiter",
    "RateLimitState",
    "now_ms",
]
