from typing import Dict, Iterable, List

from schemas.execution_log import ExecutionStep, StepType

UNKNOWN_BUCKET = "unknown"


def group_steps(steps: Iterable[ExecutionStep]) -> Dict[str, List[ExecutionStep]]:
    """
    Bucket steps by step type.

    All seven known buckets are always present; anything else lands in
    "unknown". Order within a bucket follows the input and no step is dropped.
    """
    grouped: Dict[str, List[ExecutionStep]] = {step_type.value: [] for step_type in StepType}

    for step in steps:
        step_type = str(step.step_type or "").lower()
        if step_type in grouped and step_type != UNKNOWN_BUCKET:
            grouped[step_type].append(step)
        else:
            grouped.setdefault(UNKNOWN_BUCKET, []).append(step)

    return grouped
