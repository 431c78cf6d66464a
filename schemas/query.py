from datetime import datetime, timezone
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.core.errors import QueryValidationError
from schemas.execution_log import ExecutionStatus

SortField = Literal["start_time", "end_time", "total_duration_ms", "created_at"]
SortOrder = Literal["asc", "desc"]


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime; naive values are taken as UTC.

    Raises:
        ValueError: if the string is not ISO-8601
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "query"
        message = error.get("msg", "invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        messages.append(f"{location}: {message}")
    return messages


class ExecutionLogStatsFilter(BaseModel):
    """
    Filter accepted by the statistics view.

    Values arrive as raw query-string values; blank strings mean "not set".
    """
    model_config = ConfigDict(extra="ignore")

    business_id: Optional[str] = None
    context: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        if value is None or isinstance(value, datetime):
            if isinstance(value, datetime) and value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value
        if not isinstance(value, str):
            raise ValueError("must be an ISO-8601 date string")
        if not value.strip():
            return None
        try:
            return parse_iso_datetime(value)
        except ValueError:
            raise ValueError(f"'{value}' is not a valid ISO-8601 date") from None

    @classmethod
    def parse(cls, params: Optional[Mapping[str, Any]] = None):
        """
        Build the filter from request parameters.

        Raises:
            QueryValidationError: with one message per malformed parameter
        """
        try:
            return cls.model_validate(dict(params or {}))
        except ValidationError as exc:
            raise QueryValidationError(_format_errors(exc)) from exc


class ExecutionLogQuery(ExecutionLogStatsFilter):
    """
    Filter, sort and pagination request for the list view.

    Constructed per request and discarded after use.
    """
    status: Optional[ExecutionStatus] = None
    conversation_id: Optional[str] = None
    search: Optional[str] = None
    customer_message: Optional[str] = None
    ai_response: Optional[str] = None
    final_decision: Optional[str] = None
    step_type: Optional[str] = None

    page: Optional[int] = Field(default=None, description="1-based page number")
    limit: Optional[int] = Field(default=None, description="Page size, clamped server-side")
    sort_by: Optional[SortField] = None
    sort_order: Optional[SortOrder] = None

    @field_validator("sort_order", mode="before")
    @classmethod
    def _lower_sort_order(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value
