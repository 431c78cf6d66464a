import json

import pytest

from app.core.errors import StoreUnavailableError
from querying.predicate import MATCH_ALL, Eq
from store.file_store import JsonlTraceStore


def write_jsonl(path, lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.mark.asyncio
async def test_missing_file_is_an_empty_store(tmp_path):
    store = JsonlTraceStore(path=str(tmp_path / "absent.jsonl"))

    assert await store.count(MATCH_ALL) == 0
    assert await store.find_one(MATCH_ALL) is None
    await store.ping()


@pytest.mark.asyncio
async def test_malformed_lines_are_skipped(tmp_path, make_document):
    path = tmp_path / "traces.jsonl"
    write_jsonl(path, [
        json.dumps(make_document(status="failed")),
        "{not json",
        "",
        json.dumps(make_document(status="completed")),
    ])
    store = JsonlTraceStore(path=str(path))

    assert await store.count(MATCH_ALL) == 2
    failed = await store.find_one(Eq("status", "failed"))
    assert failed["_id"] == "log-001"


@pytest.mark.asyncio
async def test_fresh_exports_are_picked_up(tmp_path, make_document):
    path = tmp_path / "traces.jsonl"
    write_jsonl(path, [json.dumps(make_document())])
    store = JsonlTraceStore(path=str(path))
    assert await store.count(MATCH_ALL) == 1

    write_jsonl(path, [json.dumps(make_document()), json.dumps(make_document())])
    assert await store.count(MATCH_ALL) == 2


@pytest.mark.asyncio
async def test_sorted_paging(tmp_path, make_document):
    path = tmp_path / "traces.jsonl"
    write_jsonl(path, [json.dumps(make_document()) for _ in range(5)])
    store = JsonlTraceStore(path=str(path))

    ids = [doc["_id"] async for doc in store.find(MATCH_ALL, sort=(("start_time", -1),), skip=1, limit=2)]

    assert ids == ["log-004", "log-003"]


@pytest.mark.asyncio
async def test_unreadable_path_is_store_unavailable(tmp_path):
    # a directory exists but cannot be opened as a file
    store = JsonlTraceStore(path=str(tmp_path))

    with pytest.raises(StoreUnavailableError):
        await store.count(MATCH_ALL)
