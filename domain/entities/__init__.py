"""Domain entities for the MES global search."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Union


PROJECTED_FIELDS: tuple[str, ...] = ("id", "type", "title", "description", "url", "icon", "category")


@dataclass(frozen=True, slots=True)
class SearchableItem:
    """A candidate result: a page, order, product, user, setting or action."""

    id: str
    type: str
    title: str = ""
    description: str = ""
    url: str | None = None
    icon: str | None = None
    category: str | None = None
    keywords: tuple[str, ...] = ()
    type_label: str | None = None

    def project(self) -> dict[str, str]:
        """Return the public wire form (no keywords, no score)."""
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title or "",
            "description": self.description or "",
            "url": self.url or "",
            "icon": self.icon or "",
            "category": self.category or "",
        }

    def to_dict(self) -> dict[str, str]:
        payload = self.project()
        if self.type_label is not None:
            payload["type_label"] = self.type_label
        return payload

    def without_keywords(self) -> SearchableItem:
        return replace(self, keywords=())

    def with_type_label(self, type_label: str) -> SearchableItem:
        return replace(self, type_label=type_label)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchableItem:
        keywords = data.get("keywords") or ()
        return cls(
            id=str(data.get("id", "")),
            type=str(data.get("type") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            url=data.get("url") or None,
            icon=data.get("icon") or None,
            category=data.get("category") or None,
            keywords=tuple(str(keyword) for keyword in keywords),
            type_label=data.get("type_label"),
        )


@dataclass(frozen=True, slots=True)
class ScoredItem:
    """Internal pairing of an item with its relevance score."""

    item: SearchableItem
    score: int


@dataclass(slots=True)
class TypeResults:
    """Scored items of one type, as returned by the matcher."""

    type: str
    type_label: str
    items: list[SearchableItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "type_label": self.type_label,
            "items": [item.project() for item in self.items],
            "count": self.count,
        }


@dataclass(frozen=True, slots=True)
class TruncationMeta:
    original_count: int
    truncated: bool

    def to_dict(self) -> dict[str, Any]:
        return {"originalCount": self.original_count, "truncated": self.truncated}


@dataclass(frozen=True, slots=True)
class CategoryMeta:
    original_count: int
    truncated: bool
    category: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalCount": self.original_count,
            "category": self.category,
            "truncated": self.truncated,
        }


@dataclass(frozen=True, slots=True)
class SingleCategoryMeta:
    original_count: int
    truncated: bool
    hybrid_type: str = "single-category"

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalCount": self.original_count,
            "hybridType": self.hybrid_type,
            "truncated": self.truncated,
        }


@dataclass(frozen=True, slots=True)
class MultiCategoryMeta:
    original_count: int
    truncated: bool
    parent_type: str
    category: str
    hybrid_type: str = "multi-category"

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalCount": self.original_count,
            "parentType": self.parent_type,
            "category": self.category,
            "hybridType": self.hybrid_type,
            "truncated": self.truncated,
        }


GroupMetadata = Union[TruncationMeta, CategoryMeta, SingleCategoryMeta, MultiCategoryMeta]


@dataclass(slots=True)
class SearchGroup:
    """A presentation bucket of items sharing a grouping key.

    ``count`` is the number of items before truncation; ``items`` holds at most
    ``max_results_per_group`` of them.
    """

    id: str
    type: str
    label: str
    items: list[SearchableItem]
    count: int
    priority: int
    metadata: GroupMetadata
    description: str = ""
    icon: str = ""
    collapsible: bool = True
    default_expanded: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "description": self.description,
            "icon": self.icon,
            "items": [item.to_dict() for item in self.items],
            "count": self.count,
            "priority": self.priority,
            "collapsible": self.collapsible,
            "defaultExpanded": self.default_expanded,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(slots=True)
class GroupStats:
    average_group_size: int = 0
    largest_group_size: int = 0
    smallest_group_size: int = 0
    group_size_distribution: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "averageGroupSize": self.average_group_size,
            "largestGroupSize": self.largest_group_size,
            "smallestGroupSize": self.smallest_group_size,
            "groupSizeDistribution": dict(self.group_size_distribution),
        }


@dataclass(slots=True)
class GroupedResults:
    groups: list[SearchGroup]
    total_count: int
    group_count: int
    strategy: str
    stats: GroupStats = field(default_factory=GroupStats)

    @classmethod
    def empty(cls, strategy: str) -> GroupedResults:
        return cls(groups=[], total_count=0, group_count=0, strategy=strategy)

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups": [group.to_dict() for group in self.groups],
            "totalCount": self.total_count,
            "groupCount": self.group_count,
            "strategy": self.strategy,
            "stats": self.stats.to_dict(),
        }


class GroupingStrategy(str, Enum):
    TYPE = "type"
    CATEGORY = "category"
    HYBRID = "hybrid"
    INTELLIGENT = "intelligent"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: GroupingStrategy | str | None) -> GroupingStrategy:
        """Unrecognized values fall back to grouping by type."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return cls.TYPE


Grouper = Callable[[list[SearchableItem]], GroupedResults]
Predicate = Callable[[SearchableItem], bool]


def _default_type_priority() -> dict[str, int]:
    return {"page": 0, "order": 1, "product": 2, "user": 3, "setting": 4}


@dataclass(slots=True)
class GroupingConfig:
    """Knobs shared by every grouping strategy."""

    type_priority: dict[str, int] = field(default_factory=_default_type_priority)
    category_priority: dict[str, int] = field(default_factory=dict)
    show_empty_groups: bool = False
    max_groups: int = 10
    max_results_per_group: int = 20
    custom_grouper: Grouper | None = None


@dataclass(slots=True)
class SearchFilter:
    type: str
    value: Any
    label: str
    enabled: bool
    predicate: Predicate

    def matches(self, item: SearchableItem) -> bool:
        return bool(self.predicate(item))


@dataclass(slots=True)
class SearchHistoryEntry:
    id: str
    query: str
    timestamp: datetime
    result_count: int


@dataclass(slots=True)
class PopularQuery:
    query: str
    count: int = 1


@dataclass(slots=True)
class SearchStats:
    total_searches: int = 0
    average_result_count: int = 0
    popular_queries: list[PopularQuery] = field(default_factory=list)
    recent_search_time: datetime | None = None


__all__ = [
    "PROJECTED_FIELDS",
    "SearchableItem",
    "ScoredItem",
    "TypeResults",
    "TruncationMeta",
    "CategoryMeta",
    "SingleCategoryMeta",
    "MultiCategoryMeta",
    "GroupMetadata",
    "SearchGroup",
    "GroupStats",
    "GroupedResults",
    "GroupingStrategy",
    "GroupingConfig",
    "Grouper",
    "Predicate",
    "SearchFilter",
    "SearchHistoryEntry",
    "PopularQuery",
    "SearchStats",
]
