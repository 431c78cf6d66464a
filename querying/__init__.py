# Querying Package
from querying.compiler import FilterCompiler
from querying.pagination import PageParams, SortDirection, normalize, total_pages
from querying.predicate import MATCH_ALL, And, Eq, Match, Ne, Or, Predicate, Range

__all__ = [
    "FilterCompiler",
    "PageParams",
    "SortDirection",
    "normalize",
    "total_pages",
    "MATCH_ALL",
    "And",
    "Eq",
    "Match",
    "Ne",
    "Or",
    "Predicate",
    "Range",
]
