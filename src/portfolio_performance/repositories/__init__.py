"""Repository layer - cache abstractions and implementations."""

from portfolio_performance.repositories.protocols import Cache
from portfolio_performance.repositories.memory import (
    EmptyCache,
    InMemoryCache,
    OverrideCache,
)

__all__ = [
    "Cache",
    "EmptyCache",
    "InMemoryCache",
    "OverrideCache",
]
