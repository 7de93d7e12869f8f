"""Tests for batch reading of server payloads."""

import pytest

from comfywire.events import ExecutionStartEvent, ProgressWsMessage
from comfywire.feeds import InMemoryFeed
from comfywire.reader import ContractReader, read_history, read_node_defs, read_queue
from comfywire.tasks import PendingTaskItem, RunningTaskItem


def _quiet(message: str) -> None:
    pass


def _history_entry(prompt, status_str="success"):
    return {
        "prompt": prompt,
        "outputs": {"9": {"images": [{"filename": "a.png", "subfolder": "", "type": "output"}]}},
        "status": {
            "status_str": status_str,
            "completed": True,
            "messages": [
                ["execution_start", {"prompt_id": prompt[1], "timestamp": 1}],
                ["execution_success", {"prompt_id": prompt[1], "timestamp": 2}],
            ],
        },
        "meta": {"9": {"node_id": "9"}},
    }


def test_read_queue_skips_malformed_entries(make_prompt) -> None:
    errors = []
    snapshot = read_queue(
        {
            "queue_running": [make_prompt("run", 1)],
            "queue_pending": [
                make_prompt("second", 3),
                ["not", "a", "prompt"],
                make_prompt("first", 2),
            ],
        },
        on_error=errors.append,
    )

    assert isinstance(snapshot.running[0], RunningTaskItem)
    assert all(isinstance(item, PendingTaskItem) for item in snapshot.pending)
    assert [item.prompt_id for item in snapshot.pending] == ["first", "second"]
    assert snapshot.size == 3
    assert len(errors) == 1


def test_read_queue_binds_cancel_callback(make_prompt) -> None:
    cancelled = []
    snapshot = read_queue({"queue_running": [make_prompt("run")]}, cancel=cancelled.append)

    assert cancelled == []
    snapshot.running[0].remove.cb()
    assert cancelled == ["run"]


def test_read_queue_tolerates_bad_payloads() -> None:
    assert read_queue(None).size == 0
    assert read_queue({"queue_running": "nope"}).size == 0


def test_read_history_keeps_valid_items(make_prompt) -> None:
    errors = []
    items = read_history(
        {
            "old": _history_entry(make_prompt("old", 1)),
            "broken": {"prompt": make_prompt("broken", 2), "outputs": "nope"},
            "new": _history_entry(make_prompt("new", 3), status_str="error"),
            "junk": 12,
        },
        on_error=errors.append,
    )

    assert [item.prompt_id for item in items] == ["new", "old"]
    assert items[1].succeeded
    assert not items[0].succeeded
    assert items[1].outputs["9"].images[0].filename == "a.png"
    assert len(errors) == 2


def test_read_node_defs_builds_registry(make_node_def) -> None:
    registry = read_node_defs(
        {"KSampler": make_node_def(), "Broken": {"input": {}}}, on_error=_quiet
    )
    assert registry.names() == ["KSampler"]
    assert registry.rejected == ["Broken"]
    assert len(read_node_defs([])) == 0


@pytest.mark.asyncio
async def test_contract_reader_uses_feed(make_prompt, make_node_def) -> None:
    feed = InMemoryFeed(
        queue={"queue_running": [make_prompt("run")], "queue_pending": []},
        history={"p1": _history_entry(make_prompt("p1"))},
        object_info={"KSampler": make_node_def()},
    )
    reader = ContractReader(feed, on_error=_quiet)

    snapshot = await reader.queue()
    history = await reader.history()
    registry = await reader.node_defs()

    assert snapshot.running[0].prompt_id == "run"
    assert history[0].prompt_id == "p1"
    assert "KSampler" in registry

    # The legacy hook is bound to the feed's interrupt call.
    await snapshot.running[0].remove.cb()
    assert feed.interrupted == ["run"]


@pytest.mark.asyncio
async def test_contract_reader_events_skip_bad_frames() -> None:
    errors = []
    feed = InMemoryFeed(
        frames=[
            {"type": "execution_start", "data": {"prompt_id": "p1", "timestamp": 1}},
            {"type": "mystery", "data": {}},
            {"type": "progress", "data": {"value": 1, "max": 2, "prompt_id": "p1"}},
            {"type": "progress", "data": {"value": 1, "max": 2, "prompt_id": "p1", "node": "3"}},
        ]
    )
    reader = ContractReader(feed, on_error=errors.append)

    messages = [message async for message in reader.events()]

    assert [m.type for m in messages] == ["execution_start", "progress"]
    assert isinstance(messages[0].data, ExecutionStartEvent)
    assert isinstance(messages[1].data, ProgressWsMessage)
    assert len(errors) == 2


@pytest.mark.asyncio
async def test_inmemory_feed_history_limit(make_prompt) -> None:
    feed = InMemoryFeed(history={"a": 1, "b": 2, "c": 3})
    assert list(await feed.fetch_history(max_items=2)) == ["b", "c"]
    assert await feed.fetch_history(max_items=0) == {}
