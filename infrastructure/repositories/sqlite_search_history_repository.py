"""SQLite-репозиторий для истории поисковых запросов."""
from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from domain.entities import PopularQuery, SearchHistoryEntry, SearchStats
from domain.interfaces import SearchHistoryRepository


class SqliteSearchHistoryRepository(SearchHistoryRepository):
    """Хранит историю запросов и статистику в лёгкой SQLite-базе."""

    def __init__(self, db_path: str | Path = "mes_search.db") -> None:
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_version (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    version INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                """
                INSERT OR IGNORE INTO schema_version (id, version) VALUES (1, 1)
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS search_history (
                    id TEXT PRIMARY KEY,
                    query TEXT NOT NULL,
                    query_key TEXT NOT NULL UNIQUE,
                    timestamp TEXT NOT NULL,
                    result_count INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS search_popular_queries (
                    query_key TEXT PRIMARY KEY,
                    query TEXT NOT NULL,
                    count INTEGER NOT NULL,
                    position INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS search_stats (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    total_searches INTEGER NOT NULL,
                    average_result_count INTEGER NOT NULL,
                    recent_search_time TEXT
                )
                """
            )

    def add(self, entry: SearchHistoryEntry) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM search_history WHERE query_key = ?", (entry.query.lower(),))
            conn.execute(
                """
                INSERT INTO search_history (id, query, query_key, timestamp, result_count)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.query,
                    entry.query.lower(),
                    entry.timestamp.isoformat(),
                    entry.result_count,
                ),
            )

    def list(self) -> list[SearchHistoryEntry]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, query, timestamp, result_count
                FROM search_history
                ORDER BY timestamp DESC, rowid DESC
                """
            ).fetchall()
        return [
            SearchHistoryEntry(
                id=row[0],
                query=row[1],
                timestamp=datetime.fromisoformat(row[2]),
                result_count=row[3],
            )
            for row in rows
        ]

    def trim(self, max_size: int) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                DELETE FROM search_history WHERE id NOT IN (
                    SELECT id FROM search_history ORDER BY timestamp DESC, rowid DESC LIMIT ?
                )
                """,
                (max(0, max_size),),
            )

    def remove(self, entry_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM search_history WHERE id = ?", (entry_id,))

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM search_history")

    def load_stats(self) -> SearchStats:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT total_searches, average_result_count, recent_search_time FROM search_stats WHERE id = 1"
            ).fetchone()
            popular_rows = conn.execute(
                "SELECT query, count FROM search_popular_queries ORDER BY position"
            ).fetchall()
        popular = [PopularQuery(query=query, count=count) for query, count in popular_rows]
        if row is None:
            return SearchStats(popular_queries=popular)
        return SearchStats(
            total_searches=row[0],
            average_result_count=row[1],
            popular_queries=popular,
            recent_search_time=datetime.fromisoformat(row[2]) if row[2] else None,
        )

    def save_stats(self, stats: SearchStats) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                REPLACE INTO search_stats (id, total_searches, average_result_count, recent_search_time)
                VALUES (1, ?, ?, ?)
                """,
                (
                    stats.total_searches,
                    stats.average_result_count,
                    stats.recent_search_time.isoformat() if stats.recent_search_time else None,
                ),
            )
            conn.execute("DELETE FROM search_popular_queries")
            conn.executemany(
                """
                INSERT OR REPLACE INTO search_popular_queries (query_key, query, count, position)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (item.query.lower(), item.query, item.count, position)
                    for position, item in enumerate(stats.popular_queries)
                ],
            )


__all__ = ["SqliteSearchHistoryRepository"]
