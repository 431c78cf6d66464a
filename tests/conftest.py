import itertools
from datetime import datetime, timedelta, timezone

import pytest

from services.execution_logs import ExecutionLogService
from store.memory import InMemoryTraceStore

BASE_TIME = datetime(2024, 1, 5, 10, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_step():
    """Factory for raw step documents."""
    counter = itertools.count(1)

    def _make(step_type="workflow_step", message="", **extra):
        index = next(counter)
        step = {
            "id": f"step-{index}",
            "step_type": step_type,
            "timestamp": (BASE_TIME + timedelta(seconds=index)).isoformat(),
            "level": "info",
            "message": message,
        }
        step.update(extra)
        return step

    return _make


@pytest.fixture
def make_document():
    """Factory for raw trace documents as the store returns them."""
    counter = itertools.count(1)

    def _make(**overrides):
        index = next(counter)
        start = BASE_TIME + timedelta(minutes=index)
        document = {
            "_id": f"log-{index:03d}",
            "execution_id": f"exec-{index:03d}",
            "conversation_id": f"conv-{index:03d}",
            "business_id": "biz-1",
            "context": "TRY_ANSWER",
            "status": "completed",
            "start_time": start.isoformat(),
            "end_time": (start + timedelta(milliseconds=1500)).isoformat(),
            "total_duration_ms": 1500,
            "original_message": f"Customer question {index}",
            "previous_messages": [],
            "request_data": {},
            "callback_urls": {},
            "steps": [],
            "created_at": start.isoformat(),
            "updated_at": start.isoformat(),
        }
        document.update(overrides)
        return document

    return _make


@pytest.fixture
def make_service():
    def _make(documents):
        return ExecutionLogService(store=InMemoryTraceStore(documents))

    return _make
