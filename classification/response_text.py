"""
AI Response Text Extractor

Finds the human-visible response text of a run.
Sources are tried in a declared order; the first non-empty one wins.
"""

from typing import Callable, Optional, Tuple

from classification.payload import FinalResponsePayload, parse_final_response
from schemas.execution_log import ExecutionLog, StepType

TextMatcher = Callable[[ExecutionLog, FinalResponsePayload], Optional[str]]


def from_last_llm_response(log: ExecutionLog, payload: FinalResponsePayload) -> Optional[str]:
    """Only the most recent llm_response step is consulted."""
    llm_steps = [step for step in log.steps if step.is_type(StepType.LLM_RESPONSE)]
    if not llm_steps:
        return None
    text = (llm_steps[-1].response or {}).get("text")
    if isinstance(text, str) and text:
        return text
    return None


TEXT_SOURCES: Tuple[Tuple[str, TextMatcher], ...] = (
    ("final_response.final_message", lambda log, p: p.final_message),
    ("final_response.ai_output.response", lambda log, p: p.ai_response),
    ("final_response.response.final_message", lambda log, p: p.nested_final_message),
    ("final_response.response.ai_output.text", lambda log, p: p.nested_ai_text),
    ("final_response", lambda log, p: p.text),
    ("llm_response", from_last_llm_response),
)


def extract_ai_response_text(log: ExecutionLog) -> str:
    """Response text, or "" when no source carries any."""
    payload = parse_final_response(log.final_response)
    for _source, matcher in TEXT_SOURCES:
        text = matcher(log, payload)
        if text:
            return text
    return ""
