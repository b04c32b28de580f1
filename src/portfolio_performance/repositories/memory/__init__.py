"""In-process repository implementations."""

from portfolio_performance.repositories.memory.cache_repo import (
    EmptyCache,
    InMemoryCache,
    OverrideCache,
)

__all__ = [
    "EmptyCache",
    "InMemoryCache",
    "OverrideCache",
]
