"""
FastAPI Dependencies

All object creation happens here, not per request.
This module wires the trace store and the stateless core collaborators
into the ExecutionLogService.

RULE: FastAPI routes call exactly one ExecutionLogService method.
"""

from functools import lru_cache

from app.core.config import Settings, settings
from querying.compiler import FilterCompiler
from services.execution_logs import ExecutionLogService
from services.stats import StatsAggregator
from store.base import TraceStore
from store.file_store import JsonlTraceStore
from store.memory import InMemoryTraceStore


def build_trace_store(config: Settings) -> TraceStore:
    """Select the trace store adapter named by configuration."""
    if config.store_backend == "memory":
        return InMemoryTraceStore(collection=config.collection_name)
    return JsonlTraceStore(path=config.traces_path, collection=config.collection_name)


@lru_cache(maxsize=1)
def get_execution_log_service() -> ExecutionLogService:
    """
    Create and cache the ExecutionLogService.

    Components wired here:
    - TraceStore: memory or JSONL adapter
    - FilterCompiler: query → predicate
    - StatsAggregator: grouped counts
    """
    return ExecutionLogService(
        store=build_trace_store(settings),
        compiler=FilterCompiler(),
        aggregator=StatsAggregator(),
        default_sort_field=settings.default_sort_field,
        default_page_size=settings.default_page_size,
        steps_page_size=settings.steps_page_size,
    )
