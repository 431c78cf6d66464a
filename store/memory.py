"""
In-Memory Trace Store

Reference adapter that interprets the predicate AST over raw documents.
Used by tests and local runs; mirrors document-store semantics where the
core depends on them (array fan-out, missing-field handling, null ordering).
"""

import re
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

from querying.aggregation import GroupCountResult, GroupCountSpec
from querying.predicate import And, Eq, Match, Ne, Or, Predicate, Range
from schemas.query import parse_iso_datetime
from store.base import SortSpec, TraceStore


def resolve_path(document: Dict[str, Any], path: str) -> List[Any]:
    """
    Collect every value reachable by a dotted path.

    Lists fan out at each segment, and a terminal list contributes its elements.
    """
    values: List[Any] = [document]
    for part in path.split("."):
        next_values: List[Any] = []
        for value in values:
            candidates = value if isinstance(value, list) else [value]
            for candidate in candidates:
                if isinstance(candidate, dict) and part in candidate:
                    next_values.append(candidate[part])
        values = next_values

    flattened: List[Any] = []
    for value in values:
        if isinstance(value, list):
            flattened.extend(value)
        else:
            flattened.append(value)
    return flattened


def _equals(left: Any, right: Any) -> bool:
    # booleans never equal numbers
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            return parse_iso_datetime(value)
        except ValueError:
            return None
    return None


def matches(predicate: Predicate, document: Dict[str, Any]) -> bool:
    """Evaluate a predicate against one raw document."""
    if isinstance(predicate, And):
        return all(matches(clause, document) for clause in predicate.clauses)

    if isinstance(predicate, Or):
        return any(matches(clause, document) for clause in predicate.clauses)

    if isinstance(predicate, Eq):
        return any(_equals(v, predicate.value) for v in resolve_path(document, predicate.field))

    if isinstance(predicate, Ne):
        return not any(_equals(v, predicate.value) for v in resolve_path(document, predicate.field))

    if isinstance(predicate, Match):
        flags = re.IGNORECASE if predicate.ignore_case else 0
        regex = re.compile(predicate.pattern, flags)
        return any(
            isinstance(v, str) and regex.search(v) is not None
            for v in resolve_path(document, predicate.field)
        )

    if isinstance(predicate, Range):
        for value in resolve_path(document, predicate.field):
            moment = _as_datetime(value)
            if moment is None:
                continue
            if predicate.gte is not None and moment < predicate.gte:
                continue
            if predicate.lte is not None and moment > predicate.lte:
                continue
            return True
        return False

    raise TypeError(f"Unsupported predicate node: {type(predicate).__name__}")


def _sort_key(document: Dict[str, Any], field: str):
    values = resolve_path(document, field)
    value = values[0] if values else None

    # Missing sorts lowest, like a document store sorts null
    if value is None:
        return (0, 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, float(value))
    moment = _as_datetime(value)
    if moment is not None:
        return (2, moment.timestamp())
    return (3, str(value))


class InMemoryTraceStore(TraceStore):
    """
    Trace store backed by a list of raw documents.

    Documents are copied on the way out so callers cannot mutate the store.
    """

    def __init__(
        self,
        documents: Optional[Iterable[Dict[str, Any]]] = None,
        collection: Optional[str] = None,
    ):
        self._documents = [dict(doc) for doc in (documents or [])]
        if collection:
            self.collection = collection

    async def _load(self) -> List[Dict[str, Any]]:
        return self._documents

    async def _select(self, predicate: Predicate) -> List[Dict[str, Any]]:
        return [doc for doc in await self._load() if matches(predicate, doc)]

    async def find_one(self, predicate: Predicate) -> Optional[Dict[str, Any]]:
        for doc in await self._select(predicate):
            return dict(doc)
        return None

    async def find(
        self,
        predicate: Predicate,
        sort: SortSpec = (),
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> AsyncIterator[Dict[str, Any]]:
        selected = await self._select(predicate)

        # Stable sorts applied from the least to the most significant key
        for field, direction in reversed(list(sort)):
            selected.sort(key=lambda doc, f=field: _sort_key(doc, f), reverse=direction < 0)

        end = None if limit is None else skip + limit
        for doc in selected[skip:end]:
            yield dict(doc)

    async def ping(self) -> None:
        await self._load()

    async def count(self, predicate: Predicate) -> int:
        return len(await self._select(predicate))

    async def aggregate(self, spec: GroupCountSpec) -> Optional[GroupCountResult]:
        selected = await self._select(spec.match)
        if not selected:
            return None

        counts = {value: 0 for value in spec.count_values}
        total_sum = 0.0
        for doc in selected:
            group = doc.get(spec.count_field)
            if isinstance(group, str) and group in counts:
                counts[group] += 1
            amount = doc.get(spec.sum_field)
            if isinstance(amount, (int, float)) and not isinstance(amount, bool):
                total_sum += amount

        return GroupCountResult(
            total=len(selected),
            counts=counts,
            sum=total_sum,
            avg=total_sum / len(selected),
        )
