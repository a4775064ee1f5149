import unittest

from application.services.grouping import (
    calculate_group_stats,
    choose_strategy,
    group_by_category,
    group_by_hybrid,
    group_by_strategy,
    group_by_type,
    group_intelligently,
)
from domain.entities import (
    GroupedResults,
    GroupingConfig,
    GroupingStrategy,
    GroupStats,
    MultiCategoryMeta,
    SearchableItem,
    SingleCategoryMeta,
)


def _item(id_: str, type_: str, title: str = "", category: str | None = None) -> SearchableItem:
    return SearchableItem(id=id_, type=type_, title=title, description=f"{title} details", category=category)


MOCK_RESULTS = [
    _item("1", "page", "仪表板", "导航"),
    _item("2", "page", "订单管理", "业务"),
    _item("3", "order", "订单 #12345", "待处理"),
    _item("4", "order", "订单 #12346", "已完成"),
    _item("5", "product", "Widget A", "标准件"),
    _item("6", "user", "张三", "员工"),
]


class TestGroupByType(unittest.TestCase):
    def test_groups_mock_results_by_type(self):
        grouped = group_by_type(MOCK_RESULTS)

        self.assertEqual(grouped.strategy, "type")
        self.assertEqual(grouped.group_count, 4)
        self.assertEqual(grouped.total_count, 6)
        self.assertEqual([group.type for group in grouped.groups], ["page", "order", "product", "user"])
        page_group = grouped.groups[0]
        self.assertEqual(page_group.id, "type-page")
        self.assertEqual(page_group.label, "页面")
        self.assertEqual(page_group.count, 2)
        self.assertTrue(page_group.default_expanded)
        self.assertTrue(page_group.collapsible)

    def test_stats_round_half_up(self):
        stats = group_by_type(MOCK_RESULTS).stats
        self.assertEqual(stats.average_group_size, 2)
        self.assertEqual(stats.largest_group_size, 2)
        self.assertEqual(stats.smallest_group_size, 1)
        self.assertEqual(stats.group_size_distribution, {"2-3": 2, "1": 2})

    def test_empty_input(self):
        grouped = group_by_type([])
        self.assertEqual(grouped.groups, [])
        self.assertEqual(grouped.total_count, 0)
        self.assertEqual(grouped.group_count, 0)
        self.assertEqual(grouped.stats, GroupStats())

    def test_truncates_items_but_keeps_count(self):
        grouped = group_by_type(MOCK_RESULTS, GroupingConfig(max_results_per_group=1))
        page_group = grouped.groups[0]

        self.assertEqual(len(page_group.items), 1)
        self.assertEqual(page_group.count, 2)
        self.assertEqual(page_group.metadata.to_dict(), {"originalCount": 2, "truncated": True})
        self.assertFalse(grouped.groups[2].metadata.truncated)

    def test_max_groups_caps_groups_not_total(self):
        grouped = group_by_type(MOCK_RESULTS, GroupingConfig(max_groups=2))
        self.assertEqual([group.type for group in grouped.groups], ["page", "order"])
        self.assertEqual(grouped.group_count, 2)
        self.assertEqual(grouped.total_count, 6)

    def test_large_groups_start_collapsed(self):
        items = [_item(str(i), "order", f"order {i}") for i in range(6)]
        self.assertFalse(group_by_type(items).groups[0].default_expanded)

    def test_unknown_types_sort_last_with_fallback_presentation(self):
        items = [_item("a", "action", "export"), _item("b", "setting", "theme")]
        grouped = group_by_type(items)
        self.assertEqual([group.type for group in grouped.groups], ["setting", "action"])
        action = grouped.groups[1]
        self.assertEqual(action.priority, 999)
        self.assertEqual(action.label, "action")
        self.assertEqual(action.description, "action相关结果")
        self.assertEqual(action.icon, "📄")


class TestGroupByCategory(unittest.TestCase):
    def test_larger_categories_come_first(self):
        items = [
            _item("1", "page", "系统设置", "系统"),
            _item("2", "page", "订单管理", "业务"),
            _item("3", "page", "产品管理", "业务"),
        ]
        grouped = group_by_category(items)

        self.assertEqual(grouped.strategy, "category")
        self.assertEqual([group.label for group in grouped.groups], ["业务", "系统"])
        self.assertEqual(grouped.groups[0].id, "category-业务")
        self.assertEqual(grouped.groups[0].type, "category")
        self.assertEqual(grouped.groups[0].icon, "💼")
        self.assertEqual(grouped.groups[0].metadata.category, "业务")

    def test_configured_priority_wins_over_size(self):
        items = [
            _item("1", "page", "订单管理", "业务"),
            _item("2", "page", "产品管理", "业务"),
            _item("3", "page", "系统设置", "系统"),
        ]
        grouped = group_by_category(items, GroupingConfig(category_priority={"系统": 0}))
        self.assertEqual([group.label for group in grouped.groups], ["系统", "业务"])

    def test_missing_category_is_grouped_as_other(self):
        grouped = group_by_category([_item("1", "page", "x")])
        self.assertEqual(grouped.groups[0].label, "其他")

    def test_equal_sizes_keep_first_seen_order(self):
        grouped = group_by_category(MOCK_RESULTS)
        self.assertEqual(
            [group.label for group in grouped.groups],
            ["导航", "业务", "待处理", "已完成", "标准件", "员工"],
        )


class TestGroupByHybrid(unittest.TestCase):
    def test_single_and_multi_category_types(self):
        grouped = group_by_hybrid(MOCK_RESULTS)

        self.assertEqual(grouped.strategy, "hybrid")
        self.assertEqual(
            [group.id for group in grouped.groups],
            [
                "hybrid-page-导航",
                "hybrid-page-业务",
                "hybrid-order-待处理",
                "hybrid-order-已完成",
                "hybrid-product",
                "hybrid-user",
            ],
        )
        first = grouped.groups[0]
        self.assertEqual(first.label, "页面 - 导航")
        self.assertEqual(first.type, "page-导航")
        self.assertEqual(first.priority, 0)
        self.assertIsInstance(first.metadata, MultiCategoryMeta)
        self.assertEqual(first.metadata.parent_type, "page")
        self.assertEqual(grouped.groups[3].priority, 101)

        product = grouped.groups[4]
        self.assertIsInstance(product.metadata, SingleCategoryMeta)
        self.assertEqual(product.metadata.to_dict()["hybridType"], "single-category")
        self.assertEqual(product.priority, 2)

        self.assertEqual([group.default_expanded for group in grouped.groups], [True] + [False] * 5)

    def test_first_two_single_category_types_expand(self):
        items = [
            _item("1", "page", "a", "业务"),
            _item("2", "page", "b", "业务"),
            _item("3", "order", "c", "待处理"),
            _item("4", "product", "d", "标准件"),
        ]
        grouped = group_by_hybrid(items)
        self.assertEqual([group.id for group in grouped.groups], ["hybrid-page", "hybrid-order", "hybrid-product"])
        self.assertEqual([group.default_expanded for group in grouped.groups], [True, True, False])

    def test_no_group_after_the_second_expands(self):
        items = [
            _item("1", "page", "a", "业务"),
            _item("2", "page", "b", "系统"),
            _item("3", "order", "c", "待处理"),
        ]
        grouped = group_by_hybrid(items)
        self.assertEqual([group.default_expanded for group in grouped.groups], [True, False, False])

    def test_missing_category_uses_default_bucket(self):
        items = [_item("1", "page", "a"), _item("2", "page", "b", "业务")]
        grouped = group_by_hybrid(items)
        self.assertEqual(grouped.groups[0].id, "hybrid-page-默认")


class TestIntelligentGrouping(unittest.TestCase):
    def test_many_types_with_categories_use_hybrid(self):
        grouped = group_intelligently(MOCK_RESULTS)
        self.assertEqual(grouped.strategy, "intelligent-hybrid")
        self.assertEqual(grouped.group_count, 6)

    def test_few_types_many_categories_use_category(self):
        items = [_item("1", "page", "a", "业务"), _item("2", "page", "b", "系统")]
        self.assertEqual(choose_strategy(items), GroupingStrategy.CATEGORY)
        self.assertEqual(group_intelligently(items).strategy, "intelligent-category")

    def test_otherwise_uses_type(self):
        items = [_item("1", "page", "a", "业务"), _item("2", "order", "b", "业务"), _item("3", "product", "c", "业务")]
        self.assertEqual(group_intelligently(items).strategy, "intelligent-type")

    def test_uncategorised_items_use_type(self):
        items = [_item("1", "page", "a"), _item("2", "page", "b")]
        self.assertEqual(choose_strategy(items), GroupingStrategy.TYPE)

    def test_empty_input(self):
        grouped = group_intelligently([])
        self.assertEqual(grouped.strategy, "intelligent")
        self.assertEqual(grouped.groups, [])
        self.assertEqual(grouped.total_count, 0)


class TestGroupByStrategy(unittest.TestCase):
    def test_dispatches_by_name(self):
        self.assertEqual(group_by_strategy(MOCK_RESULTS, "category").strategy, "category")
        self.assertEqual(group_by_strategy(MOCK_RESULTS, GroupingStrategy.HYBRID).strategy, "hybrid")
        self.assertEqual(group_by_strategy(MOCK_RESULTS).strategy, "intelligent-hybrid")

    def test_unknown_strategy_falls_back_to_type(self):
        self.assertEqual(group_by_strategy(MOCK_RESULTS, "bogus").strategy, "type")

    def test_custom_without_grouper_groups_by_type(self):
        self.assertEqual(group_by_strategy(MOCK_RESULTS, "custom").strategy, "type")

    def test_custom_grouper_is_used(self):
        def single_group(items):
            return GroupedResults(groups=[], total_count=len(items), group_count=0, strategy="custom")

        grouped = group_by_strategy(MOCK_RESULTS, "custom", GroupingConfig(custom_grouper=single_group))
        self.assertEqual(grouped.strategy, "custom")
        self.assertEqual(grouped.total_count, 6)

    def test_serialises_to_camel_case(self):
        payload = group_by_strategy(MOCK_RESULTS, "type").to_dict()
        self.assertEqual(payload["totalCount"], 6)
        self.assertEqual(payload["groupCount"], 4)
        self.assertIn("defaultExpanded", payload["groups"][0])
        self.assertEqual(payload["stats"]["groupSizeDistribution"], {"2-3": 2, "1": 2})


class TestGroupStats(unittest.TestCase):
    def test_distribution_buckets(self):
        items = []
        for type_, size in (("a", 1), ("b", 3), ("c", 5), ("d", 7), ("e", 12)):
            items.extend(_item(f"{type_}{i}", type_, "x") for i in range(size))
        stats = calculate_group_stats(group_by_type(items).groups)

        self.assertEqual(
            stats.group_size_distribution,
            {"1": 1, "2-3": 1, "4-5": 1, "6-10": 1, "10+": 1},
        )
        self.assertEqual(stats.average_group_size, 6)
        self.assertEqual(stats.largest_group_size, 12)
        self.assertEqual(stats.smallest_group_size, 1)


if __name__ == "__main__":
    unittest.main()
