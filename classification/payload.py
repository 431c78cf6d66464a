"""
Final Response Payload Shapes

Producers have encoded the outcome of a run in several incompatible ways.
This module parses the raw `final_response` value once into a frozen view
tagged with every known shape it carries.

Known shapes:
- TEXT:            a bare string
- FINAL_MESSAGE:   {"final_message": "..."}
- AI_OUTPUT:       {"ai_output": {"decision": "...", "response": "..."}}
- NESTED_RESPONSE: {"response": {"final_message", "ai_output": {"text"},
                                  "requires_human_assistance"}}
Anything else is UNRECOGNIZED; a missing payload is ABSENT.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Optional


class PayloadShape(str, Enum):
    ABSENT = "absent"
    TEXT = "text"
    FINAL_MESSAGE = "final_message"
    AI_OUTPUT = "ai_output"
    NESTED_RESPONSE = "nested_response"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class FinalResponsePayload:
    shapes: FrozenSet[PayloadShape]
    text: Optional[str] = None
    final_message: Optional[str] = None
    ai_decision: Optional[str] = None
    ai_response: Optional[str] = None
    nested_final_message: Optional[str] = None
    nested_ai_text: Optional[str] = None
    requires_human_assistance: bool = False

    def has(self, shape: PayloadShape) -> bool:
        return shape in self.shapes


def _text(value: Any) -> Optional[str]:
    """Non-empty strings only; every other value is treated as absent."""
    if isinstance(value, str) and value:
        return value
    return None


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def parse_final_response(value: Any) -> FinalResponsePayload:
    """Parse a raw final_response value. Never raises."""
    if value is None:
        return FinalResponsePayload(shapes=frozenset({PayloadShape.ABSENT}))

    if isinstance(value, str):
        return FinalResponsePayload(shapes=frozenset({PayloadShape.TEXT}), text=value)

    if not isinstance(value, dict):
        return FinalResponsePayload(shapes=frozenset({PayloadShape.UNRECOGNIZED}))

    shapes = set()

    final_message = _text(value.get("final_message"))
    if final_message is not None:
        shapes.add(PayloadShape.FINAL_MESSAGE)

    ai_output = _mapping(value.get("ai_output"))
    ai_decision = _text(ai_output.get("decision"))
    ai_response = _text(ai_output.get("response"))
    if ai_decision is not None or ai_response is not None:
        shapes.add(PayloadShape.AI_OUTPUT)

    nested = _mapping(value.get("response"))
    nested_final_message = _text(nested.get("final_message"))
    nested_ai_text = _text(_mapping(nested.get("ai_output")).get("text"))
    requires_human = nested.get("requires_human_assistance") is True
    if nested_final_message is not None or nested_ai_text is not None or requires_human:
        shapes.add(PayloadShape.NESTED_RESPONSE)

    if not shapes:
        shapes.add(PayloadShape.UNRECOGNIZED)

    return FinalResponsePayload(
        shapes=frozenset(shapes),
        final_message=final_message,
        ai_decision=ai_decision,
        ai_response=ai_response,
        nested_final_message=nested_final_message,
        nested_ai_text=nested_ai_text,
        requires_human_assistance=requires_human,
    )
