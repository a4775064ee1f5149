"""Exceptions raised across the search layers."""
from __future__ import annotations

SEARCH_SERVICE_ERROR = "SEARCH_SERVICE_ERROR"

NON_RETRYABLE_CODES: frozenset[str] = frozenset(
    {"CANCELLED", "INVALID_PARAMS", "VALIDATION_ERROR", "INVALID_RESPONSE"}
)


class SearchError(Exception):
    """Base class for search failures."""


class SearchServiceError(SearchError):
    """Unexpected failure while serving a search request."""

    code = SEARCH_SERVICE_ERROR

    def __init__(self, query: str, message: str = "search failed") -> None:
        super().__init__(message)
        self.query = query


class SearchApiError(SearchError):
    """Failure reported by (or while talking to) the search endpoint."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.errors = errors or {}

    @property
    def retryable(self) -> bool:
        if self.code in NON_RETRYABLE_CODES:
            return False
        if self.status_code is not None and 400 <= self.status_code < 500:
            return False
        return True

    def __repr__(self) -> str:
        return f"SearchApiError(message={self.message!r}, code={self.code!r}, status_code={self.status_code!r})"


__all__ = [
    "SEARCH_SERVICE_ERROR",
    "NON_RETRYABLE_CODES",
    "SearchError",
    "SearchServiceError",
    "SearchApiError",
]
