"""
Aggregation Spec

Typed description of the single grouped-count aggregation the stats view needs.
Adapters interpret it; the core never builds store-specific pipelines.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from querying.predicate import MATCH_ALL, Predicate


@dataclass(frozen=True)
class GroupCountSpec:
    """
    Count matching documents per value of `count_field` and sum/average
    `sum_field` (missing values count as zero).
    """
    match: Predicate = MATCH_ALL
    count_field: str = "status"
    count_values: Tuple[str, ...] = ()
    sum_field: str = "total_duration_ms"


@dataclass
class GroupCountResult:
    """Summary record returned by an adapter for a GroupCountSpec."""
    total: int = 0
    counts: Dict[str, int] = field(default_factory=dict)
    sum: float = 0.0
    avg: Optional[float] = None
