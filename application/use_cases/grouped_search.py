"""Client-side search flow: validate, fetch (or reuse), filter and group results."""
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable

from application.services.grouping import apply_filters, deduplicate_results, group_by_strategy
from application.services.history import SearchHistoryService
from application.services.validation import MAX_QUERY_LENGTH, MIN_QUERY_LENGTH, validate_query
from application.use_cases.search import DEFAULT_LIMIT
from domain.entities import GroupedResults, GroupingConfig, GroupingStrategy, SearchableItem, SearchFilter
from domain.errors import SearchError
from domain.interfaces import SearchGateway
from domain.labels import CANONICAL_TYPES
from infrastructure.cache.in_memory_search_cache import InMemorySearchCache

logger = logging.getLogger(__name__)


def default_grouping_config() -> GroupingConfig:
    return GroupingConfig(max_groups=8, max_results_per_group=15)


@dataclass(slots=True)
class SearchMetrics:
    total_requests: int = 0
    cache_hits: int = 0
    last_search_duration_ms: float = 0.0
    average_response_time_ms: int = 0


@dataclass(slots=True)
class GroupedSearchOutcome:
    query: str
    results: list[SearchableItem] = field(default_factory=list)
    grouped: GroupedResults | None = None
    from_cache: bool = False
    error: str | None = None


class GroupedSearch:
    """Runs one query end to end the way the search bar does."""

    def __init__(
        self,
        gateway: SearchGateway,
        *,
        cache: InMemorySearchCache | None = None,
        history: SearchHistoryService | None = None,
        grouping: GroupingConfig | None = None,
        strategy: GroupingStrategy | str = GroupingStrategy.INTELLIGENT,
        enable_grouping: bool = True,
        limit: int = DEFAULT_LIMIT,
        min_query_length: int = MIN_QUERY_LENGTH,
        max_query_length: int = MAX_QUERY_LENGTH,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._gateway = gateway
        self._cache = cache
        self._history = history
        self._grouping = grouping or default_grouping_config()
        self._strategy = GroupingStrategy.parse(strategy)
        self._enable_grouping = enable_grouping
        self._limit = limit
        self._min_query_length = min_query_length
        self._max_query_length = max_query_length
        self._clock = clock
        self.metrics = SearchMetrics()

    def run(self, query: str, *, filters: Iterable[SearchFilter] = ()) -> GroupedSearchOutcome:
        validation = validate_query(
            query,
            min_length=self._min_query_length,
            max_length=self._max_query_length,
        )
        if not validation.is_valid:
            logger.debug("Rejected query %r: %s", query, validation.reason)
            return GroupedSearchOutcome(query=query if isinstance(query, str) else "", error=validation.reason)

        text = query.strip()
        results = self._cache.get(text) if self._cache is not None else None
        from_cache = results is not None
        if results is None:
            try:
                results = self._fetch(text)
            except SearchError as exc:
                logger.warning("Search for %r failed (%s): %s", text, getattr(exc, "code", None), exc)
                return GroupedSearchOutcome(query=text, error=str(exc))
            if self._cache is not None:
                self._cache.set(text, results)
            # Cache hits are not counted as new searches.
            if self._history is not None:
                self._history.record(text, len(results))
        else:
            self.metrics.cache_hits += 1

        visible = apply_filters(results, list(filters))
        grouped = group_by_strategy(visible, self._strategy, self._grouping) if self._enable_grouping else None
        return GroupedSearchOutcome(query=text, results=visible, grouped=grouped, from_cache=from_cache)

    def _fetch(self, text: str) -> list[SearchableItem]:
        started = self._clock()
        raw = self._gateway.search(
            {
                "query": text,
                "types": list(CANONICAL_TYPES),
                "limit": self._limit,
                "include_suggestions": False,
            }
        )
        results = deduplicate_results(raw)
        self._record_timing((self._clock() - started) * 1000)
        return results

    def _record_timing(self, duration_ms: float) -> None:
        metrics = self.metrics
        metrics.total_requests += 1
        metrics.last_search_duration_ms = duration_ms
        previous_total = metrics.average_response_time_ms * (metrics.total_requests - 1)
        metrics.average_response_time_ms = math.floor((previous_total + duration_ms) / metrics.total_requests + 0.5)


__all__ = [
    "GroupedSearch",
    "GroupedSearchOutcome",
    "SearchMetrics",
    "default_grouping_config",
]
