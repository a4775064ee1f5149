"""Grouping engine: partitions a flat result list into presentation groups."""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Callable, Iterable, Sequence

from domain.entities import (
    CategoryMeta,
    GroupedResults,
    GroupingConfig,
    GroupingStrategy,
    GroupStats,
    MultiCategoryMeta,
    SearchableItem,
    SearchFilter,
    SearchGroup,
    SingleCategoryMeta,
    TruncationMeta,
)
from domain.labels import (
    UNKNOWN_PRIORITY,
    UNKNOWN_TYPE,
    category_icon_for,
    description_for,
    icon_for,
    label_for,
    type_priority,
)

logger = logging.getLogger(__name__)

MISSING_CATEGORY = "其他"
HYBRID_MISSING_CATEGORY = "默认"
TYPE_EXPAND_MAX_COUNT = 5
CATEGORY_EXPAND_MAX_COUNT = 3
HYBRID_EXPANDED_GROUPS = 2


def _bucket(items: Iterable[SearchableItem], key: Callable[[SearchableItem], str]) -> dict[str, list[SearchableItem]]:
    buckets: dict[str, list[SearchableItem]] = {}
    for item in items:
        buckets.setdefault(key(item), []).append(item)
    return buckets


def _truncate(items: list[SearchableItem], config: GroupingConfig) -> tuple[list[SearchableItem], bool]:
    cap = max(0, config.max_results_per_group)
    return items[:cap], len(items) > cap


def _finish(
    groups: list[SearchGroup],
    total_count: int,
    config: GroupingConfig,
    strategy: str,
) -> GroupedResults:
    limited = groups[: max(0, config.max_groups)]
    return GroupedResults(
        groups=limited,
        total_count=total_count,
        group_count=len(limited),
        strategy=strategy,
        stats=calculate_group_stats(limited),
    )


def group_by_type(items: Sequence[SearchableItem], config: GroupingConfig | None = None) -> GroupedResults:
    """One group per ``item.type``, ordered by type priority."""

    cfg = config or GroupingConfig()
    items = list(items)
    groups: list[SearchGroup] = []
    for type_, members in _bucket(items, lambda item: item.type or UNKNOWN_TYPE).items():
        kept, truncated = _truncate(members, cfg)
        groups.append(
            SearchGroup(
                id=f"type-{type_}",
                type=type_,
                label=label_for(type_),
                description=description_for(type_),
                icon=icon_for(type_),
                items=kept,
                count=len(members),
                priority=type_priority(type_, cfg.type_priority),
                default_expanded=len(members) <= TYPE_EXPAND_MAX_COUNT,
                metadata=TruncationMeta(original_count=len(members), truncated=truncated),
            )
        )

    groups.sort(key=lambda group: group.priority)
    return _finish(groups, len(items), cfg, GroupingStrategy.TYPE.value)


def group_by_category(items: Sequence[SearchableItem], config: GroupingConfig | None = None) -> GroupedResults:
    """One group per ``item.category``.

    Groups are ordered by configured category priority, then by size (largest
    first). Without a ``category_priority`` table every category shares the
    unknown priority, so the order is by size alone.
    """

    cfg = config or GroupingConfig()
    items = list(items)
    groups: list[SearchGroup] = []
    for category, members in _bucket(items, lambda item: item.category or MISSING_CATEGORY).items():
        kept, truncated = _truncate(members, cfg)
        groups.append(
            SearchGroup(
                id=f"category-{category}",
                type="category",
                label=category,
                description=f"{category}相关结果",
                icon=category_icon_for(category),
                items=kept,
                count=len(members),
                priority=cfg.category_priority.get(category, UNKNOWN_PRIORITY),
                default_expanded=len(members) <= CATEGORY_EXPAND_MAX_COUNT,
                metadata=CategoryMeta(original_count=len(members), truncated=truncated, category=category),
            )
        )

    groups.sort(key=lambda group: (group.priority, -group.count))
    return _finish(groups, len(items), cfg, GroupingStrategy.CATEGORY.value)


def group_by_hybrid(items: Sequence[SearchableItem], config: GroupingConfig | None = None) -> GroupedResults:
    """Group by type, splitting a type into per-category groups when it spans several."""

    cfg = config or GroupingConfig()
    items = list(items)
    by_type: dict[str, dict[str, list[SearchableItem]]] = {}
    for item in items:
        categories = by_type.setdefault(item.type or UNKNOWN_TYPE, {})
        categories.setdefault(item.category or HYBRID_MISSING_CATEGORY, []).append(item)

    ordered_types = sorted(by_type, key=lambda type_: type_priority(type_, cfg.type_priority))

    groups: list[SearchGroup] = []
    for type_index, type_ in enumerate(ordered_types):
        categories = by_type[type_]
        type_label = label_for(type_)
        # Only the first two groups overall may start expanded.
        room_to_expand = len(groups) < HYBRID_EXPANDED_GROUPS

        if len(categories) == 1:
            members = next(iter(categories.values()))
            kept, truncated = _truncate(members, cfg)
            groups.append(
                SearchGroup(
                    id=f"hybrid-{type_}",
                    type=type_,
                    label=type_label,
                    description=description_for(type_),
                    icon=icon_for(type_),
                    items=kept,
                    count=len(members),
                    priority=type_index,
                    default_expanded=room_to_expand and type_index < HYBRID_EXPANDED_GROUPS,
                    metadata=SingleCategoryMeta(original_count=len(members), truncated=truncated),
                )
            )
            continue

        for category_index, (category, members) in enumerate(categories.items()):
            kept, truncated = _truncate(members, cfg)
            groups.append(
                SearchGroup(
                    id=f"hybrid-{type_}-{category}",
                    type=f"{type_}-{category}",
                    label=f"{type_label} - {category}",
                    description=f"{type_label}中的{category}结果",
                    icon=category_icon_for(category),
                    items=kept,
                    count=len(members),
                    priority=type_index * 100 + category_index,
                    default_expanded=type_index == 0 and category_index == 0,
                    metadata=MultiCategoryMeta(
                        original_count=len(members),
                        truncated=truncated,
                        parent_type=type_,
                        category=category,
                    ),
                )
            )

    return _finish(groups, len(items), cfg, GroupingStrategy.HYBRID.value)


def choose_strategy(items: Sequence[SearchableItem]) -> GroupingStrategy:
    """Pick the grouping strategy that best fits the shape of ``items``."""

    type_count = len({item.type for item in items})
    category_count = len({item.category for item in items})
    has_categories = any(item.category for item in items)

    if type_count <= 2 and has_categories and category_count > type_count:
        return GroupingStrategy.CATEGORY
    if type_count > 3 and has_categories:
        return GroupingStrategy.HYBRID
    return GroupingStrategy.TYPE


def group_intelligently(items: Sequence[SearchableItem], config: GroupingConfig | None = None) -> GroupedResults:
    items = list(items)
    if not items:
        return GroupedResults.empty(GroupingStrategy.INTELLIGENT.value)

    strategy = choose_strategy(items)
    logger.debug("Intelligent grouping chose %s for %d item(s)", strategy.value, len(items))
    result = _STRATEGIES[strategy](items, config or GroupingConfig())
    return replace(result, strategy=f"{GroupingStrategy.INTELLIGENT.value}-{strategy.value}")


def _group_custom(items: Sequence[SearchableItem], config: GroupingConfig) -> GroupedResults:
    if config.custom_grouper is None:
        return group_by_type(items, config)
    return config.custom_grouper(list(items))


_STRATEGIES: dict[GroupingStrategy, Callable[[Sequence[SearchableItem], GroupingConfig], GroupedResults]] = {
    GroupingStrategy.TYPE: group_by_type,
    GroupingStrategy.CATEGORY: group_by_category,
    GroupingStrategy.HYBRID: group_by_hybrid,
    GroupingStrategy.INTELLIGENT: group_intelligently,
    GroupingStrategy.CUSTOM: _group_custom,
}


def group_by_strategy(
    items: Sequence[SearchableItem],
    strategy: GroupingStrategy | str = GroupingStrategy.INTELLIGENT,
    config: GroupingConfig | None = None,
) -> GroupedResults:
    """Dispatch to a grouping strategy; unrecognized names group by type."""

    return _STRATEGIES[GroupingStrategy.parse(strategy)](items, config or GroupingConfig())


def create_filter(kind: str, value: Any, label: str, enabled: bool = True) -> SearchFilter:
    if kind == "type":
        predicate = lambda item: item.type == value  # noqa: E731
    elif kind == "category":
        predicate = lambda item: item.category == value  # noqa: E731
    elif kind == "keyword":
        needle = str(value).lower()
        predicate = lambda item: needle in (item.title or "").lower() or needle in (item.description or "").lower()  # noqa: E731
    else:
        predicate = lambda item: True  # noqa: E731
    return SearchFilter(type=kind, value=value, label=label, enabled=enabled, predicate=predicate)


def apply_filters(items: list[SearchableItem], filters: Iterable[SearchFilter]) -> list[SearchableItem]:
    """Keep items accepted by every enabled filter."""

    enabled = [search_filter for search_filter in filters if search_filter.enabled]
    if not enabled:
        return items
    return [item for item in items if all(search_filter.matches(item) for search_filter in enabled)]


def deduplicate_results(items: Iterable[SearchableItem]) -> list[SearchableItem]:
    """Drop repeated ``(type, id)`` pairs, keeping the first occurrence."""

    seen: set[tuple[str, str]] = set()
    unique: list[SearchableItem] = []
    for item in items:
        key = (item.type, item.id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def merge_results(*result_lists: Iterable[SearchableItem]) -> list[SearchableItem]:
    return deduplicate_results(item for results in result_lists for item in results)


def _size_range(size: int) -> str:
    if size <= 1:
        return "1"
    if size <= 3:
        return "2-3"
    if size <= 5:
        return "4-5"
    if size <= 10:
        return "6-10"
    return "10+"


def calculate_group_stats(groups: Sequence[SearchGroup]) -> GroupStats:
    if not groups:
        return GroupStats()

    sizes = [group.count for group in groups]
    distribution: dict[str, int] = {}
    for size in sizes:
        bucket = _size_range(size)
        distribution[bucket] = distribution.get(bucket, 0) + 1

    return GroupStats(
        # Half-up rounding; the built-in round() rounds halves to even.
        average_group_size=math.floor(sum(sizes) / len(sizes) + 0.5),
        largest_group_size=max(sizes),
        smallest_group_size=min(sizes),
        group_size_distribution=distribution,
    )


__all__ = [
    "MISSING_CATEGORY",
    "HYBRID_MISSING_CATEGORY",
    "group_by_type",
    "group_by_category",
    "group_by_hybrid",
    "group_intelligently",
    "group_by_strategy",
    "choose_strategy",
    "create_filter",
    "apply_filters",
    "deduplicate_results",
    "merge_results",
    "calculate_group_stats",
]
