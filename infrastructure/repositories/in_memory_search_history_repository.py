"""Хранилище истории поиска в памяти процесса."""
from __future__ import annotations

from dataclasses import replace

from domain.entities import PopularQuery, SearchHistoryEntry, SearchStats
from domain.interfaces import SearchHistoryRepository


class InMemorySearchHistoryRepository(SearchHistoryRepository):
    """Держит историю в списке Python; пропадает при перезапуске."""

    def __init__(self) -> None:
        self._entries: list[SearchHistoryEntry] = []
        self._stats = SearchStats()

    def add(self, entry: SearchHistoryEntry) -> None:
        key = entry.query.lower()
        self._entries = [entry] + [item for item in self._entries if item.query.lower() != key]

    def list(self) -> list[SearchHistoryEntry]:
        return [replace(entry) for entry in self._entries]

    def trim(self, max_size: int) -> None:
        del self._entries[max(0, max_size):]

    def remove(self, entry_id: str) -> None:
        self._entries = [entry for entry in self._entries if entry.id != entry_id]

    def clear(self) -> None:
        self._entries = []

    def load_stats(self) -> SearchStats:
        return _copy_stats(self._stats)

    def save_stats(self, stats: SearchStats) -> None:
        self._stats = _copy_stats(stats)


def _copy_stats(stats: SearchStats) -> SearchStats:
    return SearchStats(
        total_searches=stats.total_searches,
        average_result_count=stats.average_result_count,
        popular_queries=[PopularQuery(query=item.query, count=item.count) for item in stats.popular_queries],
        recent_search_time=stats.recent_search_time,
    )


__all__ = ["InMemorySearchHistoryRepository"]
