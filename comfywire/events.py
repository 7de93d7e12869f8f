"""Execution events and WebSocket message contracts."""

from __future__ import annotations

from typing import Annotated, Any, Dict, Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, Discriminator, StrictBool, StrictInt, StrictStr, Tag

from .constants import (
    EXECUTION_CACHED,
    EXECUTION_ERROR,
    EXECUTION_INTERRUPTED,
    EXECUTION_START,
    EXECUTION_SUCCESS,
)
from .primitives import (
    FrozenList,
    NodeId,
    NodeType,
    Number,
    OutputBundle,
    PromptId,
    WireModel,
)


class ExecutionEventBase(WireModel):
    """Fields carried by every execution lifecycle event."""

    prompt_id: PromptId
    timestamp: StrictInt


class ExecutionStartEvent(ExecutionEventBase):
    pass


class ExecutionSuccessEvent(ExecutionEventBase):
    pass


class ExecutionCachedEvent(ExecutionEventBase):
    """Nodes whose outputs were served from cache."""

    nodes: FrozenList[NodeId]


class ExecutionInterruptedEvent(ExecutionEventBase):
    node_id: NodeId
    node_type: NodeType
    executed: FrozenList[NodeId]


class ExecutionErrorEvent(ExecutionInterruptedEvent):
    """Failure of a node during execution.

    ``current_inputs`` and ``current_outputs`` are engine-side snapshots and
    are accepted whatever their shape.
    """

    exception_message: StrictStr
    exception_type: StrictStr
    traceback: FrozenList[StrictStr]
    current_inputs: Any = None
    current_outputs: Any = None


ExecutionEvent = Union[
    ExecutionStartEvent,
    ExecutionSuccessEvent,
    ExecutionCachedEvent,
    ExecutionInterruptedEvent,
    ExecutionErrorEvent,
]

EXECUTION_EVENT_MODELS: Dict[str, Type[ExecutionEventBase]] = {
    EXECUTION_START: ExecutionStartEvent,
    EXECUTION_SUCCESS: ExecutionSuccessEvent,
    EXECUTION_CACHED: ExecutionCachedEvent,
    EXECUTION_INTERRUPTED: ExecutionInterruptedEvent,
    EXECUTION_ERROR: ExecutionErrorEvent,
}


def _envelope_tag(value: Any) -> Optional[str]:
    """Read the tag of a ``(tag, body)`` pair without touching the body."""
    if isinstance(value, (list, tuple)) and value and isinstance(value[0], str):
        return value[0]
    return None


# A status-log entry: the tag is checked first and selects the body model.
ExecutionMessage = Annotated[
    Union[
        Annotated[
            Tuple[Literal["execution_start"], ExecutionStartEvent],
            Tag(EXECUTION_START),
        ],
        Annotated[
            Tuple[Literal["execution_success"], ExecutionSuccessEvent],
            Tag(EXECUTION_SUCCESS),
        ],
        Annotated[
            Tuple[Literal["execution_cached"], ExecutionCachedEvent],
            Tag(EXECUTION_CACHED),
        ],
        Annotated[
            Tuple[Literal["execution_interrupted"], ExecutionInterruptedEvent],
            Tag(EXECUTION_INTERRUPTED),
        ],
        Annotated[
            Tuple[Literal["execution_error"], ExecutionErrorEvent],
            Tag(EXECUTION_ERROR),
        ],
    ],
    Discriminator(_envelope_tag),
]


class QueueExecInfo(WireModel):
    queue_remaining: StrictInt


class StatusWsMessageStatus(WireModel):
    exec_info: QueueExecInfo


class StatusWsMessage(WireModel):
    """Queue status broadcast; ``status`` may be null or missing."""

    status: Optional[StatusWsMessageStatus] = None


class ProgressWsMessage(WireModel):
    """Step progress of the node currently executing."""

    value: StrictInt
    max: StrictInt
    prompt_id: PromptId
    node: NodeId


class ExecutingWsMessage(WireModel):
    node: NodeId
    display_node: NodeId
    prompt_id: PromptId


class ExecutedWsMessage(ExecutingWsMessage):
    outputs: OutputBundle


class DownloadModelStatus(WireModel):
    """Progress of a model download requested by the client."""

    status: StrictStr
    progress_percentage: Number
    message: StrictStr
    download_path: StrictStr
    already_existed: StrictBool


WS_MESSAGE_MODELS: Dict[str, Type[BaseModel]] = {
    "status": StatusWsMessage,
    "progress": ProgressWsMessage,
    "executing": ExecutingWsMessage,
    "executed": ExecutedWsMessage,
    "download_progress": DownloadModelStatus,
    **EXECUTION_EVENT_MODELS,
}


class WsMessage(WireModel):
    """One decoded WebSocket frame: its ``type`` and validated ``data``."""

    type: StrictStr
    data: Any

    @property
    def prompt_id(self) -> Optional[str]:
        return getattr(self.data, "prompt_id", None)

    @property
    def is_execution_event(self) -> bool:
        return isinstance(self.data, ExecutionEventBase)


__all__ = [
    "ExecutionEventBase",
    "ExecutionStartEvent",
    "ExecutionSuccessEvent",
    "ExecutionCachedEvent",
    "ExecutionInterruptedEvent",
    "ExecutionErrorEvent",
    "ExecutionEvent",
    "ExecutionMessage",
    "EXECUTION_EVENT_MODELS",
    "QueueExecInfo",
    "StatusWsMessageStatus",
    "StatusWsMessage",
    "ProgressWsMessage",
    "ExecutingWsMessage",
    "ExecutedWsMessage",
    "DownloadModelStatus",
    "WS_MESSAGE_MODELS",
    "WsMessage",
]
