"""Use case that scores catalog candidates against a free-text query."""
from __future__ import annotations

import logging
from typing import Iterable, Sequence

from domain.entities import ScoredItem, SearchableItem, TypeResults
from domain.interfaces import CandidateRepository, SuggestionSource
from domain.labels import CANONICAL_TYPES, label_for, type_priority

logger = logging.getLogger(__name__)

TITLE_WEIGHT = 100
DESCRIPTION_WEIGHT = 50
KEYWORD_WEIGHT = 30
CATEGORY_WEIGHT = 20

DEFAULT_LIMIT = 20
MAX_SUGGESTIONS = 5


def per_type_limit(limit: int, type_count: int) -> int:
    """Split ``limit`` evenly across types, never below one result per type."""

    if type_count <= 0:
        return max(1, limit)
    return max(1, limit // type_count)


def _contains(text: str | None, needle: str) -> bool:
    return bool(text) and needle in text.lower()


def score_item(item: SearchableItem, query: str) -> int:
    """Return the additive relevance score of ``item`` for ``query``.

    Matching is a case-insensitive substring test on each field. Keywords
    contribute once, however many of them match.
    """

    needle = query.lower()
    score = 0
    if _contains(item.title, needle):
        score += TITLE_WEIGHT
    if _contains(item.description, needle):
        score += DESCRIPTION_WEIGHT
    if any(_contains(keyword, needle) for keyword in item.keywords):
        score += KEYWORD_WEIGHT
    if _contains(item.category, needle):
        score += CATEGORY_WEIGHT
    return score


def filter_results(items: Iterable[SearchableItem], query: str, limit: int) -> list[SearchableItem]:
    """Keep matching items, best first, with keywords stripped."""

    scored = [ScoredItem(item=item, score=score_item(item, query)) for item in items]
    matched = [entry for entry in scored if entry.score > 0]
    # list.sort is stable, so equal scores keep catalog order.
    matched.sort(key=lambda entry: entry.score, reverse=True)
    return [entry.item.without_keywords() for entry in matched[:limit]]


def type_label(type_: str) -> str:
    return label_for(type_)


def search(
    query: str,
    *,
    repository: CandidateRepository,
    types: Sequence[str] | None = None,
    limit: int = DEFAULT_LIMIT,
) -> list[TypeResults]:
    """Score every requested catalog and return non-empty groups by type priority."""

    requested = list(dict.fromkeys(types)) if types else list(CANONICAL_TYPES)
    cap = per_type_limit(limit, len(requested))

    results: list[TypeResults] = []
    for type_ in requested:
        items = filter_results(repository.fetch_candidates(type_), query, cap)
        if items:
            results.append(TypeResults(type=type_, type_label=type_label(type_), items=items))

    results.sort(key=lambda group: type_priority(group.type))
    logger.debug(
        "Query %r matched %d item(s) across %d type(s)",
        query,
        sum(group.count for group in results),
        len(results),
    )
    return results


def suggest(query: str, *, source: SuggestionSource, limit: int = MAX_SUGGESTIONS) -> list[str]:
    """Return up to ``limit`` canonical labels containing ``query``."""

    needle = query.lower()
    if not needle:
        return []
    matched = [label for label in source.labels() if needle in label.lower()]
    return matched[:limit]


__all__ = [
    "TITLE_WEIGHT",
    "DESCRIPTION_WEIGHT",
    "KEYWORD_WEIGHT",
    "CATEGORY_WEIGHT",
    "DEFAULT_LIMIT",
    "MAX_SUGGESTIONS",
    "per_type_limit",
    "score_item",
    "filter_results",
    "type_label",
    "search",
    "suggest",
]
