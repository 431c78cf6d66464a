"""
Final Decision Extractor

Derives the canonical final decision of a run from its trace.

DESIGN RULES:
- Total: every input yields a decision, never an exception
- Sources are a declared priority list, evaluated in order, first hit wins
- Derived on every read; never stored
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from classification.payload import FinalResponsePayload, parse_final_response
from schemas.execution_log import ExecutionLog, StepType


class FinalDecision(str, Enum):
    SENT_ANSWER = "SENT_ANSWER"
    REQUEST_HUMAN_ASSISTANCE = "REQUEST_HUMAN_ASSISTANCE"
    NO_ANSWER_GIVEN = "NO_ANSWER_GIVEN"
    DIRECT_REPLY = "DIRECT_REPLY"
    FALLBACK_REPLY = "FALLBACK_REPLY"
    FAILED = "FAILED"
    RUNNING = "RUNNING"
    UNKNOWN = "UNKNOWN"


# Decisions a workflow marker or callback context can signal, in check order.
STEP_DECISIONS: Tuple[FinalDecision, ...] = (
    FinalDecision.SENT_ANSWER,
    FinalDecision.REQUEST_HUMAN_ASSISTANCE,
    FinalDecision.NO_ANSWER_GIVEN,
)

DecisionMatcher = Callable[[ExecutionLog, FinalResponsePayload], Optional[str]]


def from_ai_output(log: ExecutionLog, payload: FinalResponsePayload) -> Optional[str]:
    """Authoritative: returned uppercased even when not a canonical label."""
    if payload.ai_decision:
        return payload.ai_decision.upper()
    return None


def from_human_assistance_flag(log: ExecutionLog, payload: FinalResponsePayload) -> Optional[str]:
    if payload.requires_human_assistance:
        return FinalDecision.REQUEST_HUMAN_ASSISTANCE.value
    return None


def from_workflow_steps(log: ExecutionLog, payload: FinalResponsePayload) -> Optional[str]:
    """Most recent workflow marker naming a decision in its message or metadata."""
    for step in reversed(log.steps):
        if not step.is_type(StepType.WORKFLOW_STEP):
            continue
        message = (step.message or "").lower()
        marker = (step.metadata or {}).get("step_type")
        marker = marker.upper() if isinstance(marker, str) else None
        for decision in STEP_DECISIONS:
            if decision.value.lower() in message or marker == decision.value:
                return decision.value
    return None


def from_callback_context(log: ExecutionLog, payload: FinalResponsePayload) -> Optional[str]:
    for step in reversed(log.steps):
        if not step.is_type(StepType.CALLBACK_REQUEST):
            continue
        context = (step.payload or {}).get("context")
        if not isinstance(context, str):
            continue
        context = context.upper()
        if context in {d.value for d in STEP_DECISIONS}:
            return context
    return None


def from_lifecycle_status(log: ExecutionLog, payload: FinalResponsePayload) -> Optional[str]:
    if isinstance(log.status, str) and log.status:
        return log.status.upper()
    return None


DECISION_SOURCES: Tuple[Tuple[str, DecisionMatcher], ...] = (
    ("final_response.ai_output.decision", from_ai_output),
    ("final_response.response.requires_human_assistance", from_human_assistance_flag),
    ("workflow_step", from_workflow_steps),
    ("callback_request", from_callback_context),
    ("status", from_lifecycle_status),
)


@dataclass(frozen=True)
class DecisionResult:
    decision: str
    source: Optional[str] = None


def resolve_final_decision(log: ExecutionLog) -> DecisionResult:
    """Run the priority chain and report which source decided."""
    payload = parse_final_response(log.final_response)
    for source, matcher in DECISION_SOURCES:
        decision = matcher(log, payload)
        if decision:
            return DecisionResult(decision=decision, source=source)
    return DecisionResult(decision=FinalDecision.UNKNOWN.value)


def extract_final_decision(log: ExecutionLog) -> str:
    return resolve_final_decision(log).decision


DECISION_LABELS: Dict[str, str] = {
    FinalDecision.DIRECT_REPLY.value: "Direct Reply",
    FinalDecision.FALLBACK_REPLY.value: "Fallback Reply",
    FinalDecision.SENT_ANSWER.value: "Answer Sent",
    FinalDecision.REQUEST_HUMAN_ASSISTANCE.value: "Human Assistance",
    FinalDecision.NO_ANSWER_GIVEN.value: "No Answer",
    FinalDecision.FAILED.value: "Failed",
    FinalDecision.RUNNING.value: "Running",
}

DECISION_STYLE_CLASSES: Dict[str, str] = {
    FinalDecision.DIRECT_REPLY.value: "decision-success",
    FinalDecision.FALLBACK_REPLY.value: "decision-info",
    FinalDecision.SENT_ANSWER.value: "decision-success",
    FinalDecision.REQUEST_HUMAN_ASSISTANCE.value: "decision-warning",
    FinalDecision.NO_ANSWER_GIVEN.value: "decision-info",
    FinalDecision.FAILED.value: "decision-error",
    FinalDecision.RUNNING.value: "decision-pending",
}


def decision_label(decision: str) -> str:
    """Display label; "Unknown" for anything outside the table."""
    return DECISION_LABELS.get(decision, "Unknown")


def decision_style_class(decision: str) -> str:
    """CSS class token; "decision-unknown" for anything outside the table."""
    return DECISION_STYLE_CLASSES.get(decision, "decision-unknown")
