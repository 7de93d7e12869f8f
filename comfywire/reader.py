"""Batch reading of server payloads into validated contracts.

A malformed record only costs that record: it is reported through the usual
diagnostic path and the rest of the batch is returned.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, AsyncIterator, Callable, List, Mapping, Optional

from pydantic import Field

from .config import ComfywireConfig
from .events import WsMessage
from .feeds import BaseFeed
from .primitives import FrozenList, WireModel
from .registry import NodeDefRegistry
from .tasks import HistoryTaskItem, PendingTaskItem, RunningTaskItem
from .validation import ErrorSink, validate_task_item, validate_ws_message

logger = logging.getLogger(__name__)

CancelCallback = Callable[[Optional[str]], Any]


class QueueSnapshot(WireModel):
    """Validated view of ``/queue``."""

    running: FrozenList[RunningTaskItem] = Field(default_factory=tuple)
    pending: FrozenList[PendingTaskItem] = Field(default_factory=tuple)

    @property
    def size(self) -> int:
        return len(self.running) + len(self.pending)


def _ignore_cancel(prompt_id: Optional[str] = None) -> None:
    logger.debug(f"Cancel requested for {prompt_id} with no cancel callback")


def _positional_prompt_id(entry: Any) -> Optional[str]:
    if isinstance(entry, (list, tuple)) and len(entry) > 1 and isinstance(entry[1], str):
        return entry[1]
    return None


def _entries(payload: Mapping[str, Any], key: str) -> List[Any]:
    entries = payload.get(key) or []
    if not isinstance(entries, list):
        logger.warning(f"Expected a list under {key!r}, got {type(entries).__name__}")
        return []
    return entries


def read_queue(
    payload: Any,
    cancel: Optional[CancelCallback] = None,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> QueueSnapshot:
    """Validate a ``/queue`` body.

    Running entries get a legacy :class:`~comfywire.tasks.CancelHandle`
    whose callback is ``cancel`` bound to the entry's prompt id.
    """
    if not isinstance(payload, Mapping):
        logger.warning(f"Ignoring /queue payload of type {type(payload).__name__}")
        return QueueSnapshot()

    running: List[RunningTaskItem] = []
    for entry in _entries(payload, "queue_running"):
        callback = functools.partial(cancel or _ignore_cancel, _positional_prompt_id(entry))
        raw = {"taskType": "Running", "prompt": entry, "remove": {"name": "Cancel", "cb": callback}}
        result = validate_task_item(raw, on_error=on_error, config=config)
        if result.success:
            running.append(result.data)

    pending: List[PendingTaskItem] = []
    for entry in _entries(payload, "queue_pending"):
        result = validate_task_item(
            {"taskType": "Pending", "prompt": entry}, on_error=on_error, config=config
        )
        if result.success:
            pending.append(result.data)

    # The server does not guarantee pending order.
    pending.sort(key=lambda item: item.prompt.queue_index)
    return QueueSnapshot(running=running, pending=pending)


def read_history(
    payload: Any,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> List[HistoryTaskItem]:
    """Validate a ``/history`` body, newest prompt first."""
    if not isinstance(payload, Mapping):
        logger.warning(f"Ignoring /history payload of type {type(payload).__name__}")
        return []

    items: List[HistoryTaskItem] = []
    for prompt_id, entry in payload.items():
        if isinstance(entry, Mapping):
            raw = {
                "taskType": "History",
                "prompt": entry.get("prompt"),
                "outputs": entry.get("outputs"),
                "status": entry.get("status"),
            }
        else:
            raw = entry
        result = validate_task_item(raw, on_error=on_error, config=config)
        if not result.success:
            continue
        if result.data.prompt_id != prompt_id:
            logger.debug(f"History key {prompt_id} holds prompt {result.data.prompt_id}")
        items.append(result.data)

    items.sort(key=lambda item: item.prompt.queue_index, reverse=True)
    return items


def read_node_defs(
    payload: Any,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> NodeDefRegistry:
    """Validate an ``/object_info`` body into a registry."""
    if not isinstance(payload, Mapping):
        logger.warning(f"Ignoring /object_info payload of type {type(payload).__name__}")
        return NodeDefRegistry()
    return NodeDefRegistry.from_object_info(payload, on_error=on_error, config=config)


class ContractReader:
    """Pulls payloads from a feed and returns validated contracts."""

    def __init__(
        self,
        feed: BaseFeed,
        on_error: Optional[ErrorSink] = None,
        config: Optional[ComfywireConfig] = None,
    ) -> None:
        self._feed = feed
        self._on_error = on_error
        self._config = config

    async def queue(self) -> QueueSnapshot:
        payload = await self._feed.fetch_queue()
        return read_queue(
            payload,
            cancel=self._feed.interrupt,
            on_error=self._on_error,
            config=self._config,
        )

    async def history(self, max_items: Optional[int] = None) -> List[HistoryTaskItem]:
        payload = await self._feed.fetch_history(max_items=max_items)
        return read_history(payload, on_error=self._on_error, config=self._config)

    async def node_defs(self) -> NodeDefRegistry:
        payload = await self._feed.fetch_object_info()
        return read_node_defs(payload, on_error=self._on_error, config=self._config)

    async def events(self, lifespan: Optional[float] = None) -> AsyncIterator[WsMessage]:
        """Yield validated frames, skipping the ones that do not validate."""
        async for frame in self._feed.frames(lifespan=lifespan):
            result = validate_ws_message(frame, on_error=self._on_error, config=self._config)
            if result.success:
                yield result.data


__all__ = [
    "CancelCallback",
    "QueueSnapshot",
    "read_queue",
    "read_history",
    "read_node_defs",
    "ContractReader",
]
