"""Static display tables for result types and categories."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

CANONICAL_TYPES: tuple[str, ...] = ("page", "order", "product", "user", "setting")
UNKNOWN_TYPE = "unknown"
UNKNOWN_PRIORITY = 999

DEFAULT_TYPE_PRIORITY: Mapping[str, int] = MappingProxyType(
    {"page": 0, "order": 1, "product": 2, "user": 3, "setting": 4}
)

_TYPE_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "page": "页面",
        "order": "订单",
        "product": "产品",
        "user": "用户",
        "setting": "设置",
        UNKNOWN_TYPE: "其他",
    }
)

_TYPE_DESCRIPTIONS: Mapping[str, str] = MappingProxyType(
    {
        "page": "系统页面和导航",
        "order": "订单和交易记录",
        "product": "产品和商品信息",
        "user": "用户和联系人",
        "setting": "系统设置和配置",
        UNKNOWN_TYPE: "其他类型结果",
    }
)

_TYPE_ICONS: Mapping[str, str] = MappingProxyType(
    {
        "page": "📄",
        "order": "📋",
        "product": "📦",
        "user": "👤",
        "setting": "⚙️",
        UNKNOWN_TYPE: "📁",
    }
)

_CATEGORY_ICONS: Mapping[str, str] = MappingProxyType(
    {
        "导航": "🧭",
        "业务": "💼",
        "分析": "📊",
        "系统": "⚙️",
        "界面": "🎨",
        "账户": "👤",
        "安全": "🔒",
        "待处理": "⏳",
        "已完成": "✅",
        "进行中": "🔄",
        "标准件": "🔧",
        "定制件": "🛠️",
        "工具": "🔨",
        "员工": "👥",
    }
)

DEFAULT_TYPE_ICON = "📄"
DEFAULT_CATEGORY_ICON = "📂"


def label_for(type_: str) -> str:
    if type_ in _TYPE_LABELS:
        return _TYPE_LABELS[type_]
    return type_


def description_for(type_: str) -> str:
    if type_ in _TYPE_DESCRIPTIONS:
        return _TYPE_DESCRIPTIONS[type_]
    return f"{type_}相关结果"


def icon_for(type_: str) -> str:
    if type_ in _TYPE_ICONS:
        return _TYPE_ICONS[type_]
    return DEFAULT_TYPE_ICON


def category_icon_for(category: str) -> str:
    if category in _CATEGORY_ICONS:
        return _CATEGORY_ICONS[category]
    return DEFAULT_CATEGORY_ICON


def type_priority(type_: str, table: Mapping[str, int] | None = None) -> int:
    """Return the configured priority of ``type_``; unknown types sort last."""
    priorities = DEFAULT_TYPE_PRIORITY if table is None else table
    return priorities.get(type_, UNKNOWN_PRIORITY)


__all__ = [
    "CANONICAL_TYPES",
    "UNKNOWN_TYPE",
    "UNKNOWN_PRIORITY",
    "DEFAULT_TYPE_PRIORITY",
    "DEFAULT_TYPE_ICON",
    "DEFAULT_CATEGORY_ICON",
    "label_for",
    "description_for",
    "icon_for",
    "category_icon_for",
    "type_priority",
]
