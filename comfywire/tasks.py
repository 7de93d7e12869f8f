"""Queue and history task contracts (``/queue`` and ``/history``)."""

from __future__ import annotations

from typing import Annotated, Any, Callable, Dict, List, Literal, Optional, Union

from pydantic import (
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    model_serializer,
    model_validator,
)

from .constants import TERMINAL_EVENT_TYPES
from .events import ExecutionMessage
from .primitives import (
    FrozenList,
    NodeId,
    NodeType,
    Number,
    OpenWireModel,
    OutputBundle,
    PromptId,
    QueueIndex,
    WireModel,
)

TaskType = Literal["Pending", "Running", "History"]

_PROMPT_FIELDS = (
    "queue_index",
    "prompt_id",
    "inputs",
    "extra_data",
    "outputs_to_execute",
)


class PromptInputItem(WireModel):
    """One node of the submitted API graph."""

    inputs: Dict[StrictStr, Any]
    class_type: NodeType


class Workflow(OpenWireModel):
    """Saved editor graph attached to a prompt.

    Only the top-level layout is checked here; nodes and links are kept as
    submitted.
    """

    nodes: FrozenList[Any]
    links: Optional[FrozenList[Any]] = None
    groups: Optional[FrozenList[Any]] = None
    last_node_id: Optional[NodeId] = None
    last_link_id: Optional[StrictInt] = None
    config: Optional[Dict[str, Any]] = None
    extra: Optional[Dict[str, Any]] = None
    version: Optional[Number] = None


class ExtraPngInfo(OpenWireModel):
    workflow: Workflow


class ExtraData(WireModel):
    extra_pnginfo: ExtraPngInfo
    client_id: StrictStr


class TaskPrompt(WireModel):
    """The queued unit of work.

    On the wire this is the positional list
    ``[queue_index, prompt_id, inputs, extra_data, outputs_to_execute]``;
    it is exposed with named fields and dumps back to the same list.
    """

    queue_index: QueueIndex
    prompt_id: PromptId
    inputs: Dict[NodeId, PromptInputItem]
    extra_data: ExtraData
    outputs_to_execute: FrozenList[NodeId]

    @model_validator(mode="before")
    @classmethod
    def _from_positional(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != len(_PROMPT_FIELDS):
                raise ValueError(
                    f"prompt must have {len(_PROMPT_FIELDS)} elements, got {len(value)}"
                )
            return dict(zip(_PROMPT_FIELDS, value))
        return value

    @model_serializer(mode="wrap")
    def _to_positional(self, handler: Any) -> List[Any]:
        data = handler(self)
        return [data[name] for name in _PROMPT_FIELDS]


class TaskStatus(WireModel):
    """Final outcome of a prompt plus its execution log, oldest first."""

    status_str: Literal["success", "error"]
    completed: StrictBool
    messages: FrozenList[ExecutionMessage]

    @property
    def terminal_event(self) -> Optional[tuple]:
        """Last success, error or interrupted message, if any."""
        for message in reversed(self.messages):
            if message[0] in TERMINAL_EVENT_TYPES:
                return message
        return None

    def events_of(self, event_type: str) -> List[Any]:
        """Bodies of all logged messages tagged ``event_type``."""
        return [body for tag, body in self.messages if tag == event_type]


class CancelHandle(WireModel):
    """Deprecated cancellation hook attached to a running task.

    The callback is an opaque token owned by whoever built the task item;
    comfywire stores it but never calls it. New code should interrupt through
    the feed (``BaseFeed.interrupt``) instead.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: Literal["Cancel"] = "Cancel"
    cb: Callable[..., Any]


class _TaskItemBase(WireModel):
    prompt: TaskPrompt

    @property
    def prompt_id(self) -> str:
        return self.prompt.prompt_id


class PendingTaskItem(_TaskItemBase):
    """Queued, not yet started."""

    taskType: Literal["Pending"]


class RunningTaskItem(_TaskItemBase):
    """Currently executing."""

    taskType: Literal["Running"]
    remove: CancelHandle


class HistoryTaskItem(_TaskItemBase):
    """Finished prompt with its per-node outputs."""

    taskType: Literal["History"]
    status: Optional[TaskStatus] = None
    outputs: Dict[NodeId, OutputBundle]

    @property
    def succeeded(self) -> bool:
        return self.status is not None and self.status.status_str == "success"


TaskItem = Annotated[
    Union[PendingTaskItem, RunningTaskItem, HistoryTaskItem],
    Field(discriminator="taskType"),
]

__all__ = [
    "TaskType",
    "PromptInputItem",
    "Workflow",
    "ExtraPngInfo",
    "ExtraData",
    "TaskPrompt",
    "TaskStatus",
    "CancelHandle",
    "PendingTaskItem",
    "RunningTaskItem",
    "HistoryTaskItem",
    "TaskItem",
]
