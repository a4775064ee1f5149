"""Gateway that runs the matcher in-process instead of over HTTP."""
from __future__ import annotations

from typing import Any, Mapping

from application.use_cases.global_search import flatten_results
from application.use_cases.search import DEFAULT_LIMIT, search
from domain.entities import SearchableItem
from domain.interfaces import CandidateRepository, SearchGateway


class InProcessSearchGateway(SearchGateway):
    def __init__(self, repository: CandidateRepository) -> None:
        self._repository = repository

    def search(self, params: Mapping[str, Any]) -> list[SearchableItem]:
        results = search(
            str(params["query"]).strip(),
            repository=self._repository,
            types=params.get("types"),
            limit=params.get("limit") or DEFAULT_LIMIT,
        )
        return flatten_results(results)


__all__ = ["InProcessSearchGateway"]
