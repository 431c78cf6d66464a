"""
Execution Log Service

Read-only use cases over the trace store: list, detail, stats, steps.

FLOW:
params → query model → FilterCompiler + pagination → TraceStore
       → (detail) step grouping + decision/response extraction → envelope

DESIGN RULES:
- Every use case returns an ApiResponse and never raises past its boundary
- Collaborators are injected; no module-level singletons
- Traces are never mutated
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Dict, List, Mapping, Optional, TypeVar, Union

from app.core.errors import NotFoundError, QueryValidationError, StoreUnavailableError
from app.core.logging import log_store_operation
from classification.decision import decision_label, decision_style_class, resolve_final_decision
from classification.response_text import extract_ai_response_text
from classification.steps import group_steps
from querying.compiler import FilterCompiler
from querying.pagination import clamp_limit, normalize, total_pages
from querying.predicate import Eq, Predicate, any_of
from schemas.execution_log import ExecutionLog
from schemas.query import ExecutionLogQuery, ExecutionLogStatsFilter
from schemas.response import (
    ApiResponse,
    ErrorCode,
    ExecutionLogDetail,
    ExecutionLogPage,
    ExecutionStepPage,
)
from services.formatting import format_datetime, format_duration
from services.stats import StatsAggregator
from store.base import SortSpec, TraceStore


logger = logging.getLogger(__name__)

T = TypeVar("T")
Params = Union[Mapping[str, Any], None]

INTERNAL_ERROR = "Internal server error"


class ExecutionLogService:
    """
    Orchestrates the read-only execution log use cases.

    This is the glue, not the brain: filtering lives in FilterCompiler,
    classification in the classification package, counting in StatsAggregator.
    """

    def __init__(
        self,
        store: TraceStore,
        compiler: Optional[FilterCompiler] = None,
        aggregator: Optional[StatsAggregator] = None,
        default_sort_field: str = "start_time",
        default_page_size: int = 20,
        steps_page_size: int = 50,
    ):
        """
        Args:
            store: Trace store adapter
            compiler: Query → predicate compiler
            aggregator: Statistics aggregator
            default_sort_field: Sort field when the caller gives none
            default_page_size: List page size when the caller gives none
            steps_page_size: Steps page size when the caller gives none
        """
        self._store = store
        self._compiler = compiler or FilterCompiler()
        self._aggregator = aggregator or StatsAggregator()
        self._default_sort_field = default_sort_field
        self._default_page_size = default_page_size
        self._steps_page_size = steps_page_size

    # ============================================================
    # USE CASES
    # ============================================================

    async def list_logs(self, params: Union[Params, ExecutionLogQuery] = None) -> ApiResponse:
        """List execution logs matching a filter, one page at a time."""
        try:
            query = params if isinstance(params, ExecutionLogQuery) else ExecutionLogQuery.parse(params)
            logger.info(f"[EXECUTION LOGS] Listing with {query.model_dump(exclude_none=True)}")

            predicate = self._compiler.compile(query)
            paging = normalize(
                page=query.page,
                limit=query.limit,
                sort_by=query.sort_by,
                sort_order=query.sort_order,
                default_sort_field=self._default_sort_field,
                default_limit=self._default_page_size,
            )
            sort: SortSpec = ((paging.sort_field, int(paging.sort_direction)),)

            # Independent reads against an immutable collection; both settle before a failure surfaces
            results = await asyncio.gather(
                self._call_store("count", self._store.count(predicate)),
                self._call_store("find", self._collect(predicate, sort, paging.skip, paging.limit)),
                return_exceptions=True,
            )
            for outcome in results:
                if isinstance(outcome, BaseException):
                    raise outcome
            total, documents = results

            page = ExecutionLogPage(
                items=[ExecutionLog.from_document(doc) for doc in documents],
                total=total,
                page=paging.page,
                limit=paging.limit,
                total_pages=total_pages(total, paging.limit),
            )
            logger.info(
                f"[EXECUTION LOGS] Retrieved {len(page.items)} of {page.total} "
                f"(page {page.page}/{page.total_pages})"
            )
            return ApiResponse.success(page)

        except Exception as e:
            return self._failure("Failed to retrieve execution logs", e)

    async def get_detail(self, identifier: str) -> ApiResponse:
        """Fetch one trace by store id or execution id, enriched for display."""
        try:
            log = await self._find_log(identifier)
            detail = self._to_detail(log)
            logger.info(
                f"[EXECUTION LOGS] Detail {identifier}: {len(log.steps)} steps, "
                f"decision={detail.final_decision}"
            )
            return ApiResponse.success(detail)

        except Exception as e:
            return self._failure("Failed to retrieve execution log", e)

    async def get_stats(self, params: Union[Params, ExecutionLogStatsFilter] = None) -> ApiResponse:
        """Status counts and duration totals over a filtered trace set."""
        try:
            stats_filter = (
                params if isinstance(params, ExecutionLogStatsFilter)
                else ExecutionLogStatsFilter.parse(params)
            )
            logger.info(f"[EXECUTION LOGS] Stats with {stats_filter.model_dump(exclude_none=True)}")

            predicate = self._compiler.compile_stats(stats_filter)
            stats = await self._call_store("aggregate", self._aggregator.aggregate(self._store, predicate))

            logger.info(f"[EXECUTION LOGS] Stats: {stats.model_dump()}")
            return ApiResponse.success(stats)

        except Exception as e:
            return self._failure("Failed to retrieve execution log statistics", e)

    async def get_steps(
        self,
        identifier: str,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ApiResponse:
        """
        Page through the steps of one trace.

        An unknown trace yields an empty page, not an error.
        """
        try:
            safe_page = max(1, page or 1)
            safe_limit = clamp_limit(limit, self._steps_page_size)

            try:
                steps = (await self._find_log(identifier)).steps
            except NotFoundError:
                steps = []

            skip = (safe_page - 1) * safe_limit
            result = ExecutionStepPage(
                items=steps[skip:skip + safe_limit],
                total=len(steps),
                page=safe_page,
                limit=safe_limit,
                total_pages=total_pages(len(steps), safe_limit),
            )
            return ApiResponse.success(result)

        except Exception as e:
            return self._failure("Failed to retrieve execution steps", e)

    async def ping(self) -> bool:
        """True when the store is reachable."""
        try:
            await self._call_store("ping", self._store.ping())
            return True
        except Exception as e:
            logger.warning(f"[EXECUTION LOGS] Store health check failed: {type(e).__name__}")
            return False

    # ============================================================
    # INTERNALS
    # ============================================================

    async def _find_log(self, identifier: str) -> ExecutionLog:
        lookups: List[Predicate] = [
            any_of(Eq("_id", identifier), Eq("id", identifier)),
            Eq("execution_id", identifier),
        ]
        for predicate in lookups:
            document = await self._call_store("find_one", self._store.find_one(predicate))
            if document is not None:
                return ExecutionLog.from_document(document)
        raise NotFoundError(identifier)

    def _to_detail(self, log: ExecutionLog) -> ExecutionLogDetail:
        decision = resolve_final_decision(log)
        data = log.model_dump()
        data.update(
            formatted_start_time=format_datetime(log.start_time),
            formatted_end_time=format_datetime(log.end_time) if log.end_time else None,
            formatted_duration=format_duration(log.total_duration_ms) if log.total_duration_ms else None,
            steps_by_type=group_steps(log.steps),
            final_decision=decision.decision,
            final_decision_label=decision_label(decision.decision),
            final_decision_class=decision_style_class(decision.decision),
            ai_response_text=extract_ai_response_text(log),
        )
        return ExecutionLogDetail.model_validate(data)

    async def _collect(
        self,
        predicate: Predicate,
        sort: SortSpec,
        skip: int,
        limit: int,
    ) -> List[Dict[str, Any]]:
        return [doc async for doc in self._store.find(predicate, sort=sort, skip=skip, limit=limit)]

    async def _call_store(self, operation: str, call: Awaitable[T]) -> T:
        """Await one store call, logging its duration and outcome."""
        started = time.perf_counter()
        try:
            result = await call
        except Exception as e:
            log_store_operation(operation, self._store.collection, (time.perf_counter() - started) * 1000, e)
            raise
        log_store_operation(operation, self._store.collection, (time.perf_counter() - started) * 1000)
        return result

    def _failure(self, message: str, error: Exception) -> ApiResponse:
        """Map an exception onto the error envelope."""
        if isinstance(error, QueryValidationError):
            logger.warning(f"[EXECUTION LOGS] Invalid query: {error.errors}")
            return ApiResponse.error("Invalid query parameters", error.errors, ErrorCode.VALIDATION)

        if isinstance(error, NotFoundError):
            logger.info(f"[EXECUTION LOGS] Not found: {error.identifier}")
            return ApiResponse.error("Execution log not found", code=ErrorCode.NOT_FOUND)

        if isinstance(error, StoreUnavailableError):
            logger.error(f"[EXECUTION LOGS] {message}: trace store unavailable")
        else:
            logger.exception(f"[EXECUTION LOGS] {message}: {type(error).__name__}")
        return ApiResponse.error(message, [INTERNAL_ERROR], ErrorCode.INTERNAL)
