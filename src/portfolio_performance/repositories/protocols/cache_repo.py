"""Cache protocol for memoised market data lookups."""

from typing import Any, Optional, Protocol


class Cache(Protocol):
    """
    Interface for a key-value result cache with optional expiry.

    Values must be JSON-compatible (numbers, strings, lists, dicts).
    No eviction policy and no concurrency control: concurrent puts to the
    same key are last-write-wins.
    """

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when absent or expired."""
        ...

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Store value under key; without ttl_seconds it never expires."""
        ...
