from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from schemas.execution_log import ExecutionLog, ExecutionStep


class ErrorCode:
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    INTERNAL = "internal_error"


class ApiResponse(BaseModel):
    """
    Uniform envelope returned by every execution log use case.

    This is the external contract; routes serialize it with exclude_none.
    """
    status: Literal["success", "error"]
    data: Optional[Any] = None
    message: Optional[str] = None
    errors: Optional[List[str]] = None
    error_code: Optional[str] = None

    @classmethod
    def success(cls, data: Any) -> "ApiResponse":
        return cls(status="success", data=data)

    @classmethod
    def error(cls, message: str, errors: Optional[List[str]] = None, code: str = ErrorCode.INTERNAL) -> "ApiResponse":
        return cls(status="error", message=message, errors=errors or [message], error_code=code)

    @property
    def ok(self) -> bool:
        return self.status == "success"


class ExecutionLogPage(BaseModel):
    items: List[ExecutionLog] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20
    total_pages: int = 0


class ExecutionStepPage(BaseModel):
    items: List[ExecutionStep] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 50
    total_pages: int = 0


class ExecutionLogStats(BaseModel):
    """Summary counts over a filtered trace set. Field names match the UI contract."""
    total: int = 0
    running: int = 0
    completed: int = 0
    failed: int = 0
    avgDurationMs: int = 0
    totalDurationMs: float = 0


class ExecutionLogDetail(ExecutionLog):
    """
    Detail view: the full trace enriched with derived display fields.

    final_decision and ai_response_text are recomputed on every read.
    """
    formatted_start_time: str = ""
    formatted_end_time: Optional[str] = None
    formatted_duration: Optional[str] = None
    steps_by_type: Dict[str, List[ExecutionStep]] = Field(default_factory=dict)
    final_decision: str = "UNKNOWN"
    final_decision_label: str = "Unknown"
    final_decision_class: str = "decision-unknown"
    ai_response_text: str = ""
