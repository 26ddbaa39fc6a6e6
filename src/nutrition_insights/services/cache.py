"""Cache abstractions for aggregate results."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.aggregates import Window


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete_prefix(self, prefix: str) -> int:
        """Drop every key starting with prefix and return how many were dropped."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """Process-local cache with per-key expiry."""

    _entries: dict[str, _CacheEntry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def delete_prefix(self, prefix: str) -> int:
        """Drop all keys sharing a prefix."""
        keys = [key for key in self._entries if key.startswith(prefix)]
        for key in keys:
            del self._entries[key]
        return len(keys)


@dataclass
class AggregateCache:
    """Aggregates cached per (user, window) with explicit invalidation."""

    cache: Cache
    ttl_seconds: int = 300

    def get(self, user_id: UUID, window: Window, kind: str) -> object | None:
        return self.cache.get(_key(user_id, window, kind))

    def set(self, user_id: UUID, window: Window, kind: str, value: object) -> None:
        self.cache.set(_key(user_id, window, kind), value, ttl_seconds=self.ttl_seconds)

    def invalidate_user(self, user_id: UUID) -> None:
        """Forget every cached aggregate for a user after their entries change."""
        self.cache.delete_prefix(f"aggregate:{user_id}:")


def _key(user_id: UUID, window: Window, kind: str) -> str:
    return (
        f"aggregate:{user_id}:{kind}:"
        f"{window.start.isoformat()}:{window.end.isoformat()}"
    )
