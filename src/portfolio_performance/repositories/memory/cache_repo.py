"""In-process cache implementations."""

from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from portfolio_performance.core.timezone import now_utc
from portfolio_performance.repositories.protocols import Cache


class EmptyCache:
    """Cache that never stores anything."""

    def get(self, key: str) -> Optional[Any]:
        return None

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        return None


class InMemoryCache:
    """Dict-backed cache honouring expiry against an injectable clock."""

    def __init__(self, clock: Callable[[], datetime] = now_utc):
        self._clock = clock
        self._entries: dict[str, tuple[Any, Optional[datetime]]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._entries.pop(key, None)
            return None
        return value

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        self._entries[key] = (value, expires_at)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


class OverrideCache:
    """
    Serves fixed values for selected keys in front of another cache.

    Writes always go to the underlying cache.
    """

    def __init__(self, overrides: dict[str, Any], underlying_cache: Cache):
        self._overrides = overrides
        self._underlying_cache = underlying_cache

    def get(self, key: str) -> Optional[Any]:
        if key in self._overrides:
            return self._overrides[key]
        return self._underlying_cache.get(key)

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        self._underlying_cache.put(key, value, ttl_seconds)
