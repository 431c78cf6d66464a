"""
Error Taxonomy

Exceptions raised inside the trace inspector core.

DESIGN RULES:
- Query validation failures are recovered at the service boundary
- Not-found is distinct from generic failure
- Store failures never leak connection details to callers
"""

from typing import List, Optional


class TraceInspectorError(Exception):
    """Base exception for the trace inspector."""


class QueryValidationError(TraceInspectorError):
    """A query parameter is malformed (bad date, bad page, unknown sort field)."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid query")


class NotFoundError(TraceInspectorError):
    """No trace matches the requested identifier."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Execution log not found: {identifier}")


class StoreUnavailableError(TraceInspectorError):
    """The trace store could not be reached or read."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(message)
