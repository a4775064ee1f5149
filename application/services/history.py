"""Recent and popular query tracking."""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import uuid4

from domain.entities import PopularQuery, SearchHistoryEntry, SearchStats
from domain.interfaces import SearchHistoryRepository

MAX_HISTORY_SIZE = 10
MAX_POPULAR_QUERIES = 20
HISTORY_EXPIRY = timedelta(days=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_entry_id() -> str:
    return f"search-{uuid4().hex[:12]}"


class SearchHistoryService:
    """Keeps the last few queries and running statistics about them."""

    def __init__(
        self,
        repository: SearchHistoryRepository,
        *,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = _new_entry_id,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._id_factory = id_factory

    def record(self, query: str, result_count: int) -> SearchHistoryEntry | None:
        text = query.strip()
        if not text:
            return None

        now = self._clock()
        entry = SearchHistoryEntry(id=self._id_factory(), query=text, timestamp=now, result_count=result_count)
        self._repository.add(entry)
        self._repository.trim(MAX_HISTORY_SIZE)
        self._update_stats(text, result_count, now)
        return entry

    def _update_stats(self, query: str, result_count: int, now: datetime) -> None:
        stats = self._repository.load_stats()
        stats.total_searches += 1
        previous_total = stats.average_result_count * (stats.total_searches - 1)
        stats.average_result_count = math.floor((previous_total + result_count) / stats.total_searches + 0.5)
        stats.recent_search_time = now

        key = query.lower()
        existing = next((item for item in stats.popular_queries if item.query.lower() == key), None)
        if existing is not None:
            existing.count += 1
        else:
            stats.popular_queries.append(PopularQuery(query=query))
        stats.popular_queries.sort(key=lambda item: item.count, reverse=True)
        del stats.popular_queries[MAX_POPULAR_QUERIES:]
        self._repository.save_stats(stats)

    def entries(self) -> list[SearchHistoryEntry]:
        """Return non-expired entries, newest first."""
        cutoff = self._clock() - HISTORY_EXPIRY
        return [entry for entry in self._repository.list() if entry.timestamp > cutoff]

    def recent(self, limit: int = 5) -> list[str]:
        return [entry.query for entry in self.entries()[:limit]]

    def popular(self, limit: int = 8) -> list[str]:
        return [item.query for item in self._repository.load_stats().popular_queries[:limit]]

    def stats(self) -> SearchStats:
        return self._repository.load_stats()

    def remove(self, entry_id: str) -> None:
        self._repository.remove(entry_id)

    def clear(self) -> None:
        self._repository.clear()

    def clear_stats(self) -> None:
        self._repository.save_stats(SearchStats())

    def suggestions(self, current_query: str = "") -> dict[str, list[str]]:
        needle = current_query.lower()
        if not needle:
            return {"recent": self.recent()[:3], "popular": self.popular()[:3]}

        matching = [entry.query for entry in self.entries() if needle in entry.query.lower()]
        return {
            "matching": matching[:5],
            "recent": [query for query in self.recent() if query != current_query][:2],
            "popular": [query for query in self.popular() if query != current_query][:2],
        }


__all__ = ["SearchHistoryService", "MAX_HISTORY_SIZE", "MAX_POPULAR_QUERIES", "HISTORY_EXPIRY"]
