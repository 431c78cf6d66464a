"""
Trace Store Interface

Abstract read-only interface over persisted execution logs.
Storage-agnostic - implementations can read memory, files, a document DB, etc.

DESIGN RULES:
- Read-only: this subsystem never mutates traces
- Predicates come exclusively from the FilterCompiler
- Connectivity failures raise StoreUnavailableError
- No retries here; retry policy belongs to a concrete adapter
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional, Sequence, Tuple

from querying.aggregation import GroupCountResult, GroupCountSpec
from querying.predicate import Predicate

SortSpec = Sequence[Tuple[str, int]]


class TraceStore(ABC):
    """
    Abstract base for trace persistence.

    Implementations:
    - InMemoryTraceStore (tests, local runs)
    - JsonlTraceStore (JSONL export on disk)
    """

    collection: str = "ai_inference_engine_execution_logs"

    @abstractmethod
    async def find_one(self, predicate: Predicate) -> Optional[Dict[str, Any]]:
        """Return the first raw document matching the predicate, or None."""

    @abstractmethod
    def find(
        self,
        predicate: Predicate,
        sort: SortSpec = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Stream raw documents matching the predicate.

        Args:
            predicate: Filter built by the FilterCompiler
            sort: (field, direction) pairs; direction 1 ascending, -1 descending
            skip: Documents to skip after sorting
            limit: Maximum documents to yield
        """

    @abstractmethod
    async def count(self, predicate: Predicate) -> int:
        """Count documents matching the predicate."""

    @abstractmethod
    async def aggregate(self, spec: GroupCountSpec) -> Optional[GroupCountResult]:
        """
        Run a grouped count.

        Returns:
            None when no document matches
        """

    async def ping(self) -> None:
        """Raise StoreUnavailableError if the store cannot be reached."""
