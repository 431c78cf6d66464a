"""
Store Predicate AST

Typed, store-agnostic filter constraints.
The FilterCompiler emits these nodes; a TraceStore interprets them.

DESIGN RULES:
- Immutable nodes
- Field paths are dotted; a path segment that hits a list fans out
  over every element (any element may satisfy the constraint)
- No store-specific query fragments
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple, Union


@dataclass(frozen=True)
class Eq:
    """Field equals value."""
    field: str
    value: Any


@dataclass(frozen=True)
class Ne:
    """No value at the field equals value (a missing field satisfies it)."""
    field: str
    value: Any


@dataclass(frozen=True)
class Match:
    """Field matches a regular expression (case-insensitive by default)."""
    field: str
    pattern: str
    ignore_case: bool = True


@dataclass(frozen=True)
class Range:
    """Inclusive datetime bounds on a field; either side may be open."""
    field: str
    gte: Optional[datetime] = None
    lte: Optional[datetime] = None


@dataclass(frozen=True)
class And:
    clauses: Tuple["Predicate", ...] = ()


@dataclass(frozen=True)
class Or:
    clauses: Tuple["Predicate", ...] = ()


Predicate = Union[Eq, Ne, Match, Range, And, Or]

# An empty conjunction matches every document.
MATCH_ALL = And(())


def all_of(*clauses: Predicate) -> Predicate:
    """Conjunction that collapses a single clause to itself."""
    if len(clauses) == 1:
        return clauses[0]
    return And(tuple(clauses))


def any_of(*clauses: Predicate) -> Predicate:
    """Disjunction that collapses a single clause to itself."""
    if len(clauses) == 1:
        return clauses[0]
    return Or(tuple(clauses))
