"""Кэш результатов поиска в памяти с ограниченным временем жизни."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from domain.entities import SearchableItem

DEFAULT_EXPIRY_SECONDS = 5 * 60


@dataclass(slots=True)
class _Entry:
    results: tuple[SearchableItem, ...]
    stored_at: float
    expires_at: float


class InMemorySearchCache:
    """Кэширует плоские списки результатов по нормализованному запросу."""

    def __init__(
        self,
        expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._expiry_seconds = expiry_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    @staticmethod
    def key(query: str) -> str:
        return f"search:{query.strip().lower()}"

    def get(self, query: str) -> list[SearchableItem] | None:
        cache_key = self.key(query)
        entry = self._entries.get(cache_key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[cache_key]
            return None
        return list(entry.results)

    def set(self, query: str, results: list[SearchableItem]) -> None:
        now = self._clock()
        self._entries[self.key(query)] = _Entry(
            results=tuple(results),
            stored_at=now,
            expires_at=now + self._expiry_seconds,
        )

    def cleanup_expired(self) -> int:
        now = self._clock()
        expired = [cache_key for cache_key, entry in self._entries.items() if now >= entry.expires_at]
        for cache_key in expired:
            del self._entries[cache_key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["InMemorySearchCache", "DEFAULT_EXPIRY_SECONDS"]
