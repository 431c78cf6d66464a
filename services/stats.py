"""
Stats Aggregator

Summarizes a filtered trace set: counts per status and duration totals.

DESIGN RULES:
- Exactly one aggregate call against the store
- No match is an all-zero result, not an error
- Missing durations count as zero
"""

from querying.aggregation import GroupCountSpec
from querying.predicate import Predicate
from schemas.execution_log import ExecutionStatus
from schemas.response import ExecutionLogStats
from store.base import TraceStore


class StatsAggregator:
    """Stateless; safe to share across requests."""

    STATUSES = tuple(status.value for status in ExecutionStatus)

    def build_spec(self, predicate: Predicate) -> GroupCountSpec:
        return GroupCountSpec(
            match=predicate,
            count_field="status",
            count_values=self.STATUSES,
            sum_field="total_duration_ms",
        )

    async def aggregate(self, store: TraceStore, predicate: Predicate) -> ExecutionLogStats:
        """
        Aggregate statistics for documents matching the predicate.

        Raises:
            StoreUnavailableError: propagated from the store
        """
        result = await store.aggregate(self.build_spec(predicate))
        if result is None:
            return ExecutionLogStats()

        return ExecutionLogStats(
            total=result.total,
            running=result.counts.get(ExecutionStatus.RUNNING.value, 0),
            completed=result.counts.get(ExecutionStatus.COMPLETED.value, 0),
            failed=result.counts.get(ExecutionStatus.FAILED.value, 0),
            avgDurationMs=round(result.avg or 0),
            totalDurationMs=result.sum or 0,
        )
