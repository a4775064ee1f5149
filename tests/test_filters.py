import unittest

from application.services.grouping import apply_filters, create_filter, deduplicate_results, merge_results
from domain.entities import SearchableItem

ITEMS = [
    SearchableItem(id="1", type="page", title="订单管理", description="管理订单", category="业务"),
    SearchableItem(id="2", type="product", title="Widget A", description="标准组件", category="标准件"),
    SearchableItem(id="3", type="product", title="Tool C", description="a widget tool", category="工具"),
    SearchableItem(id="1", type="order", title="订单 #1", description="", category="待处理"),
]


class TestFilters(unittest.TestCase):
    def test_no_enabled_filter_returns_input_unchanged(self):
        disabled = create_filter("type", "page", "页面", enabled=False)
        self.assertIs(apply_filters(ITEMS, [disabled]), ITEMS)
        self.assertIs(apply_filters(ITEMS, []), ITEMS)

    def test_type_filter(self):
        filtered = apply_filters(ITEMS, [create_filter("type", "product", "产品")])
        self.assertEqual([item.id for item in filtered], ["2", "3"])

    def test_category_filter(self):
        filtered = apply_filters(ITEMS, [create_filter("category", "业务", "业务")])
        self.assertEqual([item.title for item in filtered], ["订单管理"])

    def test_keyword_filter_checks_title_and_description(self):
        filtered = apply_filters(ITEMS, [create_filter("keyword", "WIDGET", "widget")])
        self.assertEqual([item.id for item in filtered], ["2", "3"])

    def test_enabled_filters_combine(self):
        filters = [
            create_filter("type", "product", "产品"),
            create_filter("keyword", "tool", "tool"),
            create_filter("category", "业务", "业务", enabled=False),
        ]
        self.assertEqual([item.title for item in apply_filters(ITEMS, filters)], ["Tool C"])

    def test_unknown_filter_kind_accepts_everything(self):
        self.assertEqual(apply_filters(ITEMS, [create_filter("date", "2024", "2024")]), ITEMS)


class TestDeduplicate(unittest.TestCase):
    def test_same_id_different_type_is_kept(self):
        self.assertEqual(len(deduplicate_results(ITEMS)), 4)

    def test_first_occurrence_wins(self):
        duplicate = SearchableItem(id="1", type="page", title="renamed")
        unique = deduplicate_results([*ITEMS, duplicate])
        self.assertEqual(len(unique), 4)
        self.assertEqual(unique[0].title, "订单管理")

    def test_merge_is_idempotent(self):
        self.assertEqual(merge_results(ITEMS, ITEMS), deduplicate_results(ITEMS))
        self.assertEqual(merge_results(ITEMS[:2], ITEMS[1:]), ITEMS)

    def test_keys_do_not_collide_across_separators(self):
        items = [
            SearchableItem(id="b-c", type="a", title="x"),
            SearchableItem(id="c", type="a-b", title="y"),
        ]
        self.assertEqual(len(deduplicate_results(items)), 2)


if __name__ == "__main__":
    unittest.main()
