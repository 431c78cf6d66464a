from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    DEBUG = "debug"


class StepType(str, Enum):
    API_INVOCATION = "api_invocation"
    LLM_QUERY = "llm_query"
    LLM_RESPONSE = "llm_response"
    CALLBACK_REQUEST = "callback_request"
    CALLBACK_RESPONSE = "callback_response"
    WORKFLOW_STEP = "workflow_step"
    ERROR = "error"


class ExecutionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class ExecutionStep(BaseModel):
    """
    One recorded sub-event within a trace.

    step_type is kept as a plain string: producers have emitted values
    outside StepType and those steps must survive a read.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    step_type: str = "unknown"
    timestamp: Optional[datetime] = None
    duration_ms: Optional[float] = None
    level: str = LogLevel.INFO.value
    message: Optional[str] = ""
    payload: Optional[Dict[str, Any]] = None
    response: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("step_type", "level", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    def is_type(self, step_type: StepType) -> bool:
        """Case-insensitive step type check."""
        return str(self.step_type).lower() == step_type.value


class ExecutionLog(BaseModel):
    """
    Immutable record of one orchestration run.

    final_response is deliberately untyped (string or nested dict depending
    on the producer version); see classification.payload for its shapes.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    execution_id: Optional[str] = None
    conversation_id: Optional[str] = None
    business_id: Optional[str] = None
    context: Optional[str] = None
    status: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_duration_ms: Optional[float] = None

    # Request data
    original_message: str = ""
    previous_messages: List[Dict[str, Any]] = Field(default_factory=list)
    request_data: Dict[str, Any] = Field(default_factory=dict)
    callback_urls: Dict[str, Any] = Field(default_factory=dict)

    steps: List[ExecutionStep] = Field(default_factory=list)

    # Final result
    final_response: Any = None
    error_message: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator(
        "original_message", "previous_messages", "request_data", "callback_urls", "steps",
        mode="before",
    )
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Document stores return null for fields a producer never filled in
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        if info.field_name == "steps" and isinstance(value, list):
            return [step for step in value if step is not None]
        return value

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ExecutionLog":
        """Build from a raw store document, mapping `_id` onto `id`."""
        data = dict(document)
        raw_id = data.pop("_id", None)
        if raw_id is not None and data.get("id") is None:
            data["id"] = str(raw_id)
        return cls.model_validate(data)
