"""Abstract interfaces for the MES global search."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from domain.entities import SearchableItem, SearchHistoryEntry, SearchStats


class CandidateRepository(ABC):
    """Read-only source of candidate items, one catalog per type."""

    @abstractmethod
    def types(self) -> tuple[str, ...]:
        """Return the type tags this repository can serve."""

    @abstractmethod
    def fetch_candidates(self, type_: str) -> Sequence[SearchableItem]:
        """Return every candidate of ``type_`` (empty for unknown types)."""


class SuggestionSource(ABC):
    """Provides the canonical labels used for query suggestions."""

    @abstractmethod
    def labels(self) -> Sequence[str]:
        """Return suggestion labels in display order."""


class SearchGateway(ABC):
    """Produces a flat list of labeled results for a query."""

    @abstractmethod
    def search(self, params: Mapping[str, Any]) -> list[SearchableItem]:
        """Run a search and return items annotated with ``type_label``."""


class SearchHistoryRepository(ABC):
    """Persists recent queries and aggregate search statistics."""

    @abstractmethod
    def add(self, entry: SearchHistoryEntry) -> None:
        """Store an entry, replacing one with the same query (case-insensitive)."""

    @abstractmethod
    def list(self) -> list[SearchHistoryEntry]:
        """Return entries, newest first."""

    @abstractmethod
    def trim(self, max_size: int) -> None:
        """Keep only the newest ``max_size`` entries."""

    @abstractmethod
    def remove(self, entry_id: str) -> None:
        """Delete one entry by id."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every entry."""

    @abstractmethod
    def load_stats(self) -> SearchStats:
        """Return aggregate statistics."""

    @abstractmethod
    def save_stats(self, stats: SearchStats) -> None:
        """Replace aggregate statistics."""


__all__ = [
    "CandidateRepository",
    "SuggestionSource",
    "SearchGateway",
    "SearchHistoryRepository",
]
