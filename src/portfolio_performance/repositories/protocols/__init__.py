"""Repository protocol definitions (interfaces)."""

from portfolio_performance.repositories.protocols.cache_repo import Cache

__all__ = [
    "Cache",
]
