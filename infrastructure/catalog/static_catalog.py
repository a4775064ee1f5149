"""Fixed in-memory catalogs used until a real data source is wired in."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence

from domain.entities import SearchableItem
from domain.interfaces import CandidateRepository, SuggestionSource

DASHBOARD_URL = "/dashboard"
PROFILE_SETTINGS_URL = "/settings/profile"
APPEARANCE_SETTINGS_URL = "/settings/appearance"
PASSWORD_SETTINGS_URL = "/settings/password"


def _item(id_: str, type_: str, title: str, description: str, url: str, icon: str, category: str, *keywords: str) -> SearchableItem:
    return SearchableItem(
        id=id_,
        type=type_,
        title=title,
        description=description,
        url=url,
        icon=icon,
        category=category,
        keywords=keywords,
    )


PAGES: tuple[SearchableItem, ...] = (
    _item("page-dashboard", "page", "仪表板", "查看系统概览和关键指标", DASHBOARD_URL, "📊", "导航",
          "dashboard", "overview", "概览", "仪表板"),
    _item("page-orders", "page", "订单管理", "管理和查看所有订单信息", "/orders", "📋", "业务",
          "order", "orders", "订单", "管理"),
    _item("page-products", "page", "产品管理", "管理产品信息和库存", "/products", "📦", "业务",
          "product", "products", "产品", "库存"),
    _item("page-customers", "page", "客户管理", "管理客户信息和关系", "/customers", "👥", "业务",
          "customer", "customers", "客户", "用户"),
    _item("page-reports", "page", "报表中心", "查看各类业务报表和分析", "/reports", "📈", "分析",
          "report", "reports", "报表", "分析", "统计"),
    _item("page-settings", "page", "系统设置", "配置系统参数和选项", PROFILE_SETTINGS_URL, "⚙️", "系统",
          "setting", "settings", "设置", "配置"),
)

ORDERS: tuple[SearchableItem, ...] = (
    _item("order-12345", "order", "订单 #12345", "客户张三的采购订单，金额￥1,250.00", "/orders/12345", "📋", "待处理",
          "12345", "张三", "采购", "order"),
    _item("order-12346", "order", "订单 #12346", "客户李四的服务订单，金额￥850.00", "/orders/12346", "📋", "已完成",
          "12346", "李四", "服务", "order"),
    _item("order-12347", "order", "订单 #12347", "客户王五的维修订单，金额￥320.00", "/orders/12347", "📋", "进行中",
          "12347", "王五", "维修", "order"),
)

PRODUCTS: tuple[SearchableItem, ...] = (
    _item("product-widget-a", "product", "Widget A", "高质量的标准组件，适用于多种场景", "/products/widget-a", "📦", "标准件",
          "widget", "component", "组件", "标准"),
    _item("product-component-b", "product", "Component B", "定制化组件，满足特殊需求", "/products/component-b", "📦", "定制件",
          "component", "组件", "定制", "custom"),
    _item("product-tool-c", "product", "Tool C", "专业工具，提高工作效率", "/products/tool-c", "🔧", "工具",
          "tool", "工具", "efficiency", "效率"),
)

USERS: tuple[SearchableItem, ...] = (
    _item("user-zhang-san", "user", "张三", "生产主管 - 负责生产计划和执行", "/users/zhang-san", "👤", "员工",
          "张三", "生产", "主管", "production"),
    _item("user-li-si", "user", "李四", "质量工程师 - 负责质量控制和改进", "/users/li-si", "👤", "员工",
          "李四", "质量", "工程师", "quality"),
    _item("user-wang-wu", "user", "王五", "设备维护员 - 负责设备保养和维修", "/users/wang-wu", "👤", "员工",
          "王五", "设备", "维护", "maintenance"),
)

SETTINGS: tuple[SearchableItem, ...] = (
    _item("setting-appearance", "setting", "外观设置", "配置主题、语言和显示选项", APPEARANCE_SETTINGS_URL, "🎨", "界面",
          "appearance", "外观", "主题", "theme", "语言"),
    _item("setting-profile", "setting", "个人资料", "管理个人信息和账户设置", PROFILE_SETTINGS_URL, "👤", "账户",
          "profile", "个人", "资料", "account"),
    _item("setting-password", "setting", "密码安全", "更改密码和安全设置", PASSWORD_SETTINGS_URL, "🔒", "安全",
          "password", "密码", "安全", "security"),
)

DEFAULT_CATALOGS: Mapping[str, tuple[SearchableItem, ...]] = MappingProxyType(
    {
        "page": PAGES,
        "order": ORDERS,
        "product": PRODUCTS,
        "user": USERS,
        "setting": SETTINGS,
    }
)

SUGGESTION_LABELS: tuple[str, ...] = (
    "仪表板", "订单管理", "产品管理", "客户管理", "报表中心", "系统设置",
    "dashboard", "orders", "products", "customers", "reports", "settings",
)


class StaticCandidateRepository(CandidateRepository):
    """Serves candidates from immutable per-type tuples."""

    def __init__(self, catalogs: Mapping[str, Sequence[SearchableItem]] | None = None) -> None:
        source = DEFAULT_CATALOGS if catalogs is None else catalogs
        self._catalogs = {type_: tuple(items) for type_, items in source.items()}

    def types(self) -> tuple[str, ...]:
        return tuple(self._catalogs)

    def fetch_candidates(self, type_: str) -> Sequence[SearchableItem]:
        return self._catalogs.get(type_, ())


class StaticSuggestionSource(SuggestionSource):
    def __init__(self, labels: Sequence[str] = SUGGESTION_LABELS) -> None:
        self._labels = tuple(labels)

    def labels(self) -> Sequence[str]:
        return self._labels


__all__ = [
    "PAGES",
    "ORDERS",
    "PRODUCTS",
    "USERS",
    "SETTINGS",
    "DEFAULT_CATALOGS",
    "SUGGESTION_LABELS",
    "StaticCandidateRepository",
    "StaticSuggestionSource",
]
