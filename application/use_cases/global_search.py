"""Request-level use cases: run the matcher and build the response payload."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from application.services.grouping import group_by_strategy
from application.services.validation import GroupedSearchRequest, SearchRequest
from application.use_cases.search import search, suggest
from domain.entities import GroupingConfig, SearchableItem, TypeResults
from domain.errors import SearchServiceError
from domain.interfaces import CandidateRepository, SuggestionSource

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def flatten_results(results: Iterable[TypeResults]) -> list[SearchableItem]:
    """Turn per-type groups into one list, each item tagged with its type label."""

    return [item.with_type_label(group.type_label) for group in results for item in group.items]


def _run_matcher(
    request: SearchRequest,
    repository: CandidateRepository,
    suggestion_source: SuggestionSource,
) -> tuple[list[TypeResults], list[str]]:
    try:
        results = search(request.query, repository=repository, types=request.types, limit=request.limit)
        suggestions = suggest(request.query, source=suggestion_source) if request.include_suggestions else []
    except Exception as exc:
        logger.exception("Search request failed for query %r", request.query)
        raise SearchServiceError(request.query) from exc
    return results, suggestions


def run_global_search(
    request: SearchRequest,
    *,
    repository: CandidateRepository,
    suggestion_source: SuggestionSource,
    started_at: float | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> dict[str, Any]:
    """Return the ``data`` part of a successful search response.

    Raises ``SearchServiceError`` (after logging) if the matcher fails.
    """

    started = clock() if started_at is None else started_at
    results, suggestions = _run_matcher(request, repository, suggestion_source)
    return {
        "query": request.query,
        "results": [group.to_dict() for group in results],
        "total": sum(group.count for group in results),
        "suggestions": suggestions,
        "search_time": clock() - started,
        "timestamp": _timestamp(),
    }


def run_grouped_search(
    request: GroupedSearchRequest,
    *,
    repository: CandidateRepository,
    suggestion_source: SuggestionSource,
    grouping: GroupingConfig | None = None,
    started_at: float | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> dict[str, Any]:
    """Like ``run_global_search`` but returns the results grouped server-side."""

    started = clock() if started_at is None else started_at
    results, suggestions = _run_matcher(request, repository, suggestion_source)

    base = grouping or GroupingConfig()
    config = GroupingConfig(
        type_priority=dict(base.type_priority),
        category_priority=dict(base.category_priority),
        show_empty_groups=base.show_empty_groups,
        max_groups=request.max_groups,
        max_results_per_group=request.max_results_per_group,
        custom_grouper=base.custom_grouper,
    )
    grouped = group_by_strategy(flatten_results(results), request.strategy, config)
    return {
        "query": request.query,
        "grouped": grouped.to_dict(),
        "total": grouped.total_count,
        "suggestions": suggestions,
        "search_time": clock() - started,
        "timestamp": _timestamp(),
    }


__all__ = ["flatten_results", "run_global_search", "run_grouped_search"]
