# Services Package
from services.execution_logs import ExecutionLogService
from services.stats import StatsAggregator

__all__ = ["ExecutionLogService", "StatsAggregator"]
