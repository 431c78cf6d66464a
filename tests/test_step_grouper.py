import pytest

from classification.steps import UNKNOWN_BUCKET, group_steps
from schemas.execution_log import ExecutionStep, StepType


def steps_of(*types):
    return [ExecutionStep(id=f"s{i}", step_type=t) for i, t in enumerate(types)]


def test_known_buckets_always_present():
    grouped = group_steps([])

    assert set(grouped) == {step_type.value for step_type in StepType}
    assert all(bucket == [] for bucket in grouped.values())


def test_order_is_preserved_within_bucket():
    steps = steps_of("llm_query", "llm_response", "llm_query", "error", "llm_query")

    grouped = group_steps(steps)

    assert [s.id for s in grouped["llm_query"]] == ["s0", "s2", "s4"]
    assert [s.id for s in grouped["error"]] == ["s3"]


def test_unknown_types_are_kept():
    grouped = group_steps(steps_of("workflow_step", "telemetry", "unknown"))

    assert [s.id for s in grouped[UNKNOWN_BUCKET]] == ["s1", "s2"]


@pytest.mark.parametrize(
    "types",
    [
        (),
        ("api_invocation",),
        ("callback_request", "callback_response", "CALLBACK_REQUEST", "weird", ""),
        tuple(t.value for t in StepType) * 3 + ("x", "y"),
    ],
)
def test_no_step_is_dropped(types):
    steps = steps_of(*types)
    grouped = group_steps(steps)
    assert sum(len(bucket) for bucket in grouped.values()) == len(steps)
