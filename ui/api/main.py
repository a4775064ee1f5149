"""FastAPI layer that exposes the global search."""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query as FastAPIQuery, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from application.services.validation import (
    MAX_QUERY_LENGTH,
    GroupedSearchRequest,
    SearchRequest,
    validation_errors,
)
from application.use_cases.global_search import run_global_search, run_grouped_search
from application.use_cases.search import suggest
from domain.errors import SEARCH_SERVICE_ERROR, SearchServiceError
from infrastructure.config import Container, ContainerConfig, build_default_container
from ui.logging_utils import setup_logging

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "请求参数无效"
SERVICE_UNAVAILABLE_MESSAGE = "搜索服务暂时不可用，请稍后重试"


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Global search API started")
    yield


def _container(request: Request) -> Container:
    return request.app.state.container


def create_app(container: Container | None = None) -> FastAPI:
    app = FastAPI(title="MES Global Search API", lifespan=lifespan)
    app.state.container = container or build_default_container(ContainerConfig.from_env())

    @app.exception_handler(RequestValidationError)
    async def _validation_failed(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "message": VALIDATION_MESSAGE,
                "errors": validation_errors(exc.errors()),
            },
        )

    @app.exception_handler(SearchServiceError)
    async def _search_failed(request: Request, exc: SearchServiceError) -> JSONResponse:
        # Details were logged where the failure happened; the caller gets a generic message.
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "message": SERVICE_UNAVAILABLE_MESSAGE,
                "error_code": SEARCH_SERVICE_ERROR,
            },
        )

    @app.post("/api/search", tags=["search"], summary="Global search")
    def search_endpoint(payload: SearchRequest, request: Request) -> dict:
        started_at = time.perf_counter()
        container = _container(request)
        data = run_global_search(
            payload,
            repository=container.repository,
            suggestion_source=container.suggestion_source,
            started_at=started_at,
        )
        return {"success": True, "data": data}

    @app.post("/api/search/grouped", tags=["search"], summary="Global search with server-side grouping")
    def grouped_search_endpoint(payload: GroupedSearchRequest, request: Request) -> dict:
        started_at = time.perf_counter()
        container = _container(request)
        data = run_grouped_search(
            payload,
            repository=container.repository,
            suggestion_source=container.suggestion_source,
            grouping=container.grouping,
            started_at=started_at,
        )
        return {"success": True, "data": data}

    @app.get("/api/search/suggestions", tags=["search"], summary="Query suggestions")
    def suggestions_endpoint(
        request: Request,
        q: str = FastAPIQuery(..., min_length=1, max_length=MAX_QUERY_LENGTH, description="Partial query"),
    ) -> dict:
        query = q.strip()
        return {
            "success": True,
            "data": {
                "query": query,
                "suggestions": suggest(query, source=_container(request).suggestion_source),
            },
        }

    @app.get("/health", tags=["ops"], summary="Health check")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
