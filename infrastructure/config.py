"""Dependency wiring for the MES global search."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

from application.services.history import SearchHistoryService
from domain.entities import GroupingConfig, GroupingStrategy
from domain.interfaces import CandidateRepository, SearchGateway, SearchHistoryRepository, SuggestionSource
from infrastructure.cache.in_memory_search_cache import DEFAULT_EXPIRY_SECONDS, InMemorySearchCache
from infrastructure.catalog.static_catalog import StaticCandidateRepository, StaticSuggestionSource
from infrastructure.client.in_process_gateway import InProcessSearchGateway
from infrastructure.client.search_api_client import SearchApiClient, SearchApiClientConfig
from infrastructure.repositories.in_memory_search_history_repository import InMemorySearchHistoryRepository
from infrastructure.repositories.sqlite_search_history_repository import SqliteSearchHistoryRepository


CatalogName = Literal["static"]
HistoryStoreName = Literal["memory", "sqlite"]
GatewayName = Literal["in_process", "http"]


@dataclass(slots=True)
class Container:
    """Simple container bundling concrete infrastructure implementations."""

    repository: CandidateRepository
    suggestion_source: SuggestionSource
    history_repository: SearchHistoryRepository
    history: SearchHistoryService
    cache: InMemorySearchCache
    gateway: SearchGateway
    grouping: GroupingConfig
    strategy: GroupingStrategy
    default_limit: int


@dataclass(slots=True)
class ContainerConfig:
    """Configuration for selecting the catalog, history store and grouping defaults."""

    catalog: CatalogName = "static"
    history_store: HistoryStoreName = "memory"
    history_db_path: str = "mes_search.db"
    gateway: GatewayName = "in_process"
    api_base_url: str = "http://localhost:8000"
    default_limit: int = 20
    cache_expiry_seconds: float = DEFAULT_EXPIRY_SECONDS
    grouping_strategy: str = GroupingStrategy.INTELLIGENT.value
    max_groups: int = 8
    max_results_per_group: int = 15

    @classmethod
    def from_env(cls) -> ContainerConfig:
        defaults = cls()
        return cls(
            catalog=os.getenv("MES_SEARCH_CATALOG", defaults.catalog),  # type: ignore[arg-type]
            history_store=os.getenv("MES_SEARCH_HISTORY_STORE", defaults.history_store),  # type: ignore[arg-type]
            history_db_path=os.getenv("MES_SEARCH_HISTORY_DB", defaults.history_db_path),
            gateway=os.getenv("MES_SEARCH_GATEWAY", defaults.gateway),  # type: ignore[arg-type]
            api_base_url=os.getenv("MES_SEARCH_API_URL", defaults.api_base_url),
            default_limit=int(os.getenv("MES_SEARCH_DEFAULT_LIMIT", defaults.default_limit)),
            cache_expiry_seconds=float(os.getenv("MES_SEARCH_CACHE_EXPIRY", defaults.cache_expiry_seconds)),
            grouping_strategy=os.getenv("MES_SEARCH_STRATEGY", defaults.grouping_strategy),
            max_groups=int(os.getenv("MES_SEARCH_MAX_GROUPS", defaults.max_groups)),
            max_results_per_group=int(
                os.getenv("MES_SEARCH_MAX_RESULTS_PER_GROUP", defaults.max_results_per_group)
            ),
        )


_CATALOG_FACTORIES: dict[CatalogName, Callable[[], CandidateRepository]] = {
    "static": StaticCandidateRepository,
}


def _build_history_repository(cfg: ContainerConfig) -> SearchHistoryRepository:
    if cfg.history_store == "memory":
        return InMemorySearchHistoryRepository()
    if cfg.history_store == "sqlite":
        db_path = Path(cfg.history_db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return SqliteSearchHistoryRepository(db_path=db_path)
    raise ValueError(f"Unknown history store '{cfg.history_store}'")


def _build_gateway(cfg: ContainerConfig, repository: CandidateRepository) -> SearchGateway:
    if cfg.gateway == "in_process":
        return InProcessSearchGateway(repository)
    if cfg.gateway == "http":
        return SearchApiClient(SearchApiClientConfig(base_url=cfg.api_base_url))
    raise ValueError(f"Unknown gateway '{cfg.gateway}'")


def build_default_container(config: ContainerConfig | None = None) -> Container:
    """Instantiate the default infrastructure stack."""

    cfg = config or ContainerConfig()
    try:
        repository = _CATALOG_FACTORIES[cfg.catalog]()
    except KeyError as exc:
        raise ValueError(f"Unknown catalog '{cfg.catalog}'") from exc
    history_repository = _build_history_repository(cfg)

    return Container(
        repository=repository,
        suggestion_source=StaticSuggestionSource(),
        history_repository=history_repository,
        history=SearchHistoryService(history_repository),
        cache=InMemorySearchCache(cfg.cache_expiry_seconds),
        gateway=_build_gateway(cfg, repository),
        grouping=GroupingConfig(max_groups=cfg.max_groups, max_results_per_group=cfg.max_results_per_group),
        strategy=GroupingStrategy.parse(cfg.grouping_strategy),
        default_limit=cfg.default_limit,
    )


__all__ = ["Container", "ContainerConfig", "build_default_container"]
