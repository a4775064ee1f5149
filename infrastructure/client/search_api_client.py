"""HTTP client for the global search endpoint."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import requests

from domain.entities import SearchableItem
from domain.errors import SearchApiError
from domain.interfaces import SearchGateway

logger = logging.getLogger(__name__)

MAX_QUERY_LENGTH = 100
MIN_LIMIT = 1
MAX_LIMIT = 50


@dataclass(slots=True)
class SearchApiClientConfig:
    base_url: str = "http://localhost:8000"
    endpoint: str = "/api/search"
    timeout: float = 10.0
    retries: int = 2
    backoff_base: float = 1.0
    headers: dict[str, str] = field(default_factory=dict)


class SearchApiClient(SearchGateway):
    """Calls ``POST /api/search`` and flattens the grouped response.

    Transient failures (network errors, timeouts, 5xx) are retried with
    exponential backoff; validation problems and malformed responses are not.
    """

    def __init__(
        self,
        config: SearchApiClientConfig | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config or SearchApiClientConfig()
        self._sleep = sleep

    def search(
        self,
        params: Mapping[str, Any],
        *,
        retries: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[SearchableItem]:
        self._validate(params)
        max_retries = self._config.retries if retries is None else retries

        last_error: SearchApiError | None = None
        for attempt in range(max_retries + 1):
            self._raise_if_cancelled(cancel_event)
            try:
                return self._flatten(self._request(params))
            except SearchApiError as exc:
                last_error = exc
                if not exc.retryable or attempt == max_retries:
                    break
                delay = self._config.backoff_base * (2**attempt)
                logger.warning(
                    "Search request failed (%s), retry %d/%d in %.1fs",
                    exc.code,
                    attempt + 1,
                    max_retries,
                    delay,
                )
                self._wait(delay, cancel_event)

        raise last_error or SearchApiError("搜索请求失败")

    def _wait(self, delay: float, cancel_event: threading.Event | None) -> None:
        if cancel_event is None:
            self._sleep(delay)
            return
        cancel_event.wait(delay)
        self._raise_if_cancelled(cancel_event)

    @staticmethod
    def _raise_if_cancelled(cancel_event: threading.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise SearchApiError("搜索请求已取消", "CANCELLED")

    @staticmethod
    def _validate(params: Mapping[str, Any]) -> None:
        query = params.get("query")
        if not query or not isinstance(query, str):
            raise SearchApiError("搜索关键词不能为空", "INVALID_PARAMS")
        if len(query) > MAX_QUERY_LENGTH:
            raise SearchApiError("搜索关键词过长", "INVALID_PARAMS")
        limit = params.get("limit")
        if limit is not None and (
            isinstance(limit, bool) or not isinstance(limit, int) or not MIN_LIMIT <= limit <= MAX_LIMIT
        ):
            raise SearchApiError("搜索结果数量限制无效", "INVALID_PARAMS")
        types = params.get("types")
        if types is not None and not isinstance(types, (list, tuple)):
            raise SearchApiError("搜索类型参数无效", "INVALID_PARAMS")

    def _request(self, params: Mapping[str, Any]) -> dict[str, Any]:
        url = f"{self._config.base_url.rstrip('/')}{self._config.endpoint}"
        try:
            response = requests.post(
                url,
                json=dict(params),
                headers={"X-Requested-With": "XMLHttpRequest", **self._config.headers},
                timeout=self._config.timeout,
            )
        except requests.Timeout as exc:
            raise SearchApiError("搜索请求超时", "TIMEOUT") from exc
        except requests.RequestException as exc:
            raise SearchApiError("网络请求失败", "NETWORK_ERROR") from exc

        if response.status_code == 422:
            body = _json_or_empty(response)
            raise SearchApiError(
                body.get("message") or "请求参数无效",
                "VALIDATION_ERROR",
                422,
                body.get("errors"),
            )
        if not response.ok:
            raise SearchApiError(
                f"HTTP {response.status_code}: {response.reason}",
                "HTTP_ERROR",
                response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchApiError("响应数据格式错误", "INVALID_RESPONSE") from exc
        if not isinstance(payload, dict):
            raise SearchApiError("响应数据格式错误", "INVALID_RESPONSE")
        return payload

    @staticmethod
    def _flatten(payload: dict[str, Any]) -> list[SearchableItem]:
        if not payload.get("success"):
            raise SearchApiError(
                payload.get("message") or "搜索失败",
                payload.get("error_code"),
                None,
                payload.get("errors"),
            )
        data = payload.get("data")
        if not isinstance(data, dict):
            raise SearchApiError("响应数据格式错误", "INVALID_RESPONSE")

        items: list[SearchableItem] = []
        groups = data.get("results") or []
        if not isinstance(groups, list):
            raise SearchApiError("响应数据格式错误", "INVALID_RESPONSE")
        for group in groups:
            group_items = (group.get("items") or []) if isinstance(group, dict) else None
            if not isinstance(group_items, list) or not all(isinstance(raw, dict) for raw in group_items):
                raise SearchApiError("响应数据格式错误", "INVALID_RESPONSE")
            for raw in group_items:
                items.append(SearchableItem.from_dict({**raw, "type_label": group.get("type_label")}))
        return items


def _json_or_empty(response: requests.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


__all__ = ["SearchApiClient", "SearchApiClientConfig"]
