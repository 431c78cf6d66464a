import pytest

from classification.decision import (
    DECISION_SOURCES,
    FinalDecision,
    decision_label,
    decision_style_class,
    extract_final_decision,
    resolve_final_decision,
)
from classification.payload import PayloadShape, parse_final_response
from schemas.execution_log import ExecutionLog


def build_log(**fields) -> ExecutionLog:
    fields.setdefault("status", "completed")
    return ExecutionLog.model_validate(fields)


def workflow(message="", **metadata):
    return {"step_type": "workflow_step", "message": message, "metadata": metadata or None}


def callback(context):
    return {"step_type": "callback_request", "message": "callback", "payload": {"context": context}}


def test_priority_list_is_declared_in_order():
    assert [name for name, _ in DECISION_SOURCES] == [
        "final_response.ai_output.decision",
        "final_response.response.requires_human_assistance",
        "workflow_step",
        "callback_request",
        "status",
    ]


def test_ai_output_decision_wins_over_everything():
    log = build_log(
        status="failed",
        final_response={
            "ai_output": {"decision": "direct_reply"},
            "response": {"requires_human_assistance": True},
        },
        steps=[workflow("request_human_assistance"), callback("NO_ANSWER_GIVEN")],
    )

    result = resolve_final_decision(log)

    assert result.decision == "DIRECT_REPLY"
    assert result.source == "final_response.ai_output.decision"


def test_non_canonical_ai_output_decision_is_returned_verbatim():
    log = build_log(final_response={"ai_output": {"decision": "escalate_to_billing"}})

    assert extract_final_decision(log) == "ESCALATE_TO_BILLING"
    assert decision_label("ESCALATE_TO_BILLING") == "Unknown"


def test_requires_human_assistance_flag():
    log = build_log(
        final_response={"response": {"requires_human_assistance": True}},
        steps=[workflow("sent_answer")],
    )
    assert extract_final_decision(log) == FinalDecision.REQUEST_HUMAN_ASSISTANCE.value


def test_truthy_but_not_true_flag_is_ignored():
    log = build_log(final_response={"response": {"requires_human_assistance": "yes"}})
    assert extract_final_decision(log) == "COMPLETED"


def test_most_recent_workflow_step_wins():
    log = build_log(steps=[
        workflow("Decision: no_answer_given"),
        {"step_type": "llm_response", "response": {"text": "hi"}},
        workflow("Workflow finished with SENT_ANSWER"),
        workflow("cleanup"),
    ])
    assert extract_final_decision(log) == "SENT_ANSWER"


def test_workflow_metadata_step_type():
    log = build_log(steps=[workflow("done", step_type="no_answer_given")])
    assert extract_final_decision(log) == "NO_ANSWER_GIVEN"


def test_uppercase_step_type_is_recognized():
    log = build_log(steps=[{"step_type": "WORKFLOW_STEP", "message": "request_human_assistance"}])
    assert extract_final_decision(log) == "REQUEST_HUMAN_ASSISTANCE"


def test_callback_context_when_no_workflow_signal():
    log = build_log(steps=[
        callback("sent_answer"),
        callback("request_human_assistance"),
        callback("SOMETHING_ELSE"),
    ])
    assert extract_final_decision(log) == "REQUEST_HUMAN_ASSISTANCE"


def test_workflow_signal_beats_callback_context():
    log = build_log(steps=[workflow("no_answer_given"), callback("SENT_ANSWER")])
    assert extract_final_decision(log) == "NO_ANSWER_GIVEN"


@pytest.mark.parametrize("status, expected", [("failed", "FAILED"), ("running", "RUNNING"), ("completed", "COMPLETED")])
def test_falls_back_to_status(status, expected):
    log = build_log(status=status, final_response={"unexpected": 1})

    result = resolve_final_decision(log)

    assert result.decision == expected
    assert result.source == "status"


def test_unknown_when_nothing_matches():
    log = ExecutionLog.model_validate({"steps": [{"step_type": "mystery"}]})

    result = resolve_final_decision(log)

    assert result.decision == FinalDecision.UNKNOWN.value
    assert result.source is None


@pytest.mark.parametrize("final_response", [None, "", "plain text", 42, ["a"], {"ai_output": "oops"}, {"ai_output": {"decision": 7}}])
def test_odd_payloads_never_raise(final_response):
    log = build_log(status="failed", final_response=final_response)
    assert extract_final_decision(log) == "FAILED"


def test_payload_shapes():
    assert parse_final_response(None).shapes == {PayloadShape.ABSENT}
    assert parse_final_response("hi").shapes == {PayloadShape.TEXT}
    assert parse_final_response({"other": 1}).shapes == {PayloadShape.UNRECOGNIZED}

    payload = parse_final_response({
        "final_message": "a",
        "ai_output": {"decision": "SENT_ANSWER"},
        "response": {"ai_output": {"text": "b"}},
    })
    assert payload.shapes == {PayloadShape.FINAL_MESSAGE, PayloadShape.AI_OUTPUT, PayloadShape.NESTED_RESPONSE}
    assert payload.nested_ai_text == "b"


@pytest.mark.parametrize(
    "decision, label, style",
    [
        ("SENT_ANSWER", "Answer Sent", "decision-success"),
        ("DIRECT_REPLY", "Direct Reply", "decision-success"),
        ("FALLBACK_REPLY", "Fallback Reply", "decision-info"),
        ("REQUEST_HUMAN_ASSISTANCE", "Human Assistance", "decision-warning"),
        ("NO_ANSWER_GIVEN", "No Answer", "decision-info"),
        ("FAILED", "Failed", "decision-error"),
        ("RUNNING", "Running", "decision-pending"),
        ("UNKNOWN", "Unknown", "decision-unknown"),
        ("COMPLETED", "Unknown", "decision-unknown"),
    ],
)
def test_label_and_style_lookup(decision, label, style):
    assert decision_label(decision) == label
    assert decision_style_class(decision) == style
