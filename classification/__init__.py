# Classification Package
from classification.decision import (
    FinalDecision,
    decision_label,
    decision_style_class,
    extract_final_decision,
    resolve_final_decision,
)
from classification.payload import FinalResponsePayload, PayloadShape, parse_final_response
from classification.response_text import extract_ai_response_text
from classification.steps import group_steps

__all__ = [
    "FinalDecision",
    "decision_label",
    "decision_style_class",
    "extract_final_decision",
    "resolve_final_decision",
    "FinalResponsePayload",
    "PayloadShape",
    "parse_final_response",
    "extract_ai_response_text",
    "group_steps",
]
