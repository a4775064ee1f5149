"""Streamlit demo of the global search bar with grouping and filters."""
from __future__ import annotations

import streamlit as st

from application.services.grouping import create_filter
from application.use_cases.grouped_search import GroupedSearch
from domain.entities import GroupingStrategy
from domain.labels import CANONICAL_TYPES, label_for
from infrastructure.config import Container, ContainerConfig, build_default_container
from ui.logging_utils import setup_logging


@st.cache_resource
def _build_container() -> Container:
    setup_logging()
    return build_default_container(ContainerConfig.from_env())


st.set_page_config(page_title="MES Global Search")
container = _build_container()
st.title("MES Global Search")

query = st.text_input("Query", value="订单")
strategies = [strategy.value for strategy in GroupingStrategy if strategy is not GroupingStrategy.CUSTOM]
configured = container.strategy.value
strategy = st.selectbox(
    "Grouping",
    strategies,
    index=strategies.index(configured) if configured in strategies else 0,
)
type_choice = st.selectbox(
    "Type filter",
    ["", *CANONICAL_TYPES],
    format_func=lambda value: label_for(value) if value else "全部",
)
keyword = st.text_input("Keyword filter", value="")

if st.button("Search"):
    grouped_search = GroupedSearch(
        container.gateway,
        cache=container.cache,
        history=container.history,
        grouping=container.grouping,
        strategy=strategy,
        limit=container.default_limit,
    )
    filters = [
        create_filter("type", type_choice, label_for(type_choice), enabled=bool(type_choice)),
        create_filter("keyword", keyword, keyword, enabled=bool(keyword.strip())),
    ]
    outcome = grouped_search.run(query, filters=filters)
    if outcome.error:
        st.warning(outcome.error)
    elif outcome.grouped is not None:
        st.caption(
            f"{outcome.grouped.total_count} result(s), strategy {outcome.grouped.strategy}"
            + (" (cached)" if outcome.from_cache else "")
        )
        for group in outcome.grouped.groups:
            with st.expander(f"{group.icon} {group.label} ({group.count})", expanded=group.default_expanded):
                for item in group.items:
                    st.write(f"{item.icon or ''} **{item.title}** · {item.description}  `{item.url or ''}`")
                if group.metadata.truncated:
                    st.caption(f"Showing {len(group.items)} of {group.metadata.original_count}")

st.sidebar.header("History")
suggestions = container.history.suggestions(query)
st.sidebar.write({"recent": suggestions.get("recent", []), "popular": suggestions.get("popular", [])})
