"""Rate limiting adapters.

This package provides a small abstraction layer so the client can start with
an in-memory, per-process limiter and later move to a shared store without
changing the orchestration code.
"""

from crpt_api.adapters.rate_limit.base import (
    AbstractRateLimiter,
    CancellationToken,
    RateLimitPermit,
    TimeUnit,
)
from crpt_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "CancellationToken",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitPermit",
    "TimeUnit",
]
