"""Request models and query checks applied before the matcher runs."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from domain.entities import GroupingStrategy
from application.use_cases.search import DEFAULT_LIMIT

MIN_QUERY_LENGTH = 1
MAX_QUERY_LENGTH = 100
MAX_LIMIT = 50

_REQUEST_SOURCES = frozenset({"body", "query", "path"})

TypeTag = Literal["page", "order", "product", "user", "setting"]

_UNSAFE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"eval\s*\(", re.IGNORECASE),
)


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=MIN_QUERY_LENGTH, max_length=MAX_QUERY_LENGTH)
    types: list[TypeTag] | None = Field(
        default=None,
        description="Restrict results to these types (defaults to all).",
    )
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    include_suggestions: bool = False

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class GroupedSearchRequest(SearchRequest):
    strategy: GroupingStrategy = GroupingStrategy.INTELLIGENT
    max_groups: int = Field(10, ge=1, le=50)
    max_results_per_group: int = Field(20, ge=1, le=100)

    @field_validator("strategy", mode="before")
    @classmethod
    def _parse_strategy(cls, value: Any) -> GroupingStrategy:
        return GroupingStrategy.parse(value)


def validation_errors(errors: Sequence[dict[str, Any]] | ValidationError) -> dict[str, list[str]]:
    """Collapse pydantic error records into ``{field: [message, ...]}``."""

    records = errors.errors() if isinstance(errors, ValidationError) else errors
    fields: dict[str, list[str]] = {}
    for record in records:
        location = [str(part) for part in record.get("loc", ())]
        # FastAPI prefixes the location with where the value came from.
        if len(location) > 1 and location[0] in _REQUEST_SOURCES:
            location = location[1:]
        name = ".".join(location) or "request"
        fields.setdefault(name, []).append(str(record.get("msg", "invalid value")))
    return fields


@dataclass(frozen=True, slots=True)
class QueryValidation:
    is_valid: bool
    reason: str | None = None


def validate_query(
    query: Any,
    *,
    min_length: int = MIN_QUERY_LENGTH,
    max_length: int = MAX_QUERY_LENGTH,
) -> QueryValidation:
    """Cheap pre-flight check run before a query leaves the client."""

    if not isinstance(query, str):
        return QueryValidation(False, "Query must be a string")

    trimmed = query.strip()
    if len(trimmed) < min_length:
        return QueryValidation(False, f"Query too short (min: {min_length})")
    if len(trimmed) > max_length:
        return QueryValidation(False, f"Query too long (max: {max_length})")
    if any(pattern.search(trimmed) for pattern in _UNSAFE_PATTERNS):
        return QueryValidation(False, "Invalid characters detected")
    return QueryValidation(True)


__all__ = [
    "MIN_QUERY_LENGTH",
    "MAX_QUERY_LENGTH",
    "MAX_LIMIT",
    "TypeTag",
    "SearchRequest",
    "GroupedSearchRequest",
    "QueryValidation",
    "validation_errors",
    "validate_query",
]
