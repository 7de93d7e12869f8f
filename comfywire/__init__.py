"""comfywire: wire contracts for a node-graph execution server."""

from .config import ComfywireConfig, get_config, load_config
from .events import ExecutionMessage, WsMessage
from .feeds import BaseFeed, InMemoryFeed
from .nodedefs import InputSpec, NodeDef
from .reader import ContractReader, QueueSnapshot, read_history, read_node_defs, read_queue
from .registry import NodeDefRegistry
from .settings import Settings
from .tasks import HistoryTaskItem, PendingTaskItem, RunningTaskItem, TaskItem
from .validation import (
    ValidationFailure,
    ValidationResult,
    validate,
    validate_execution_message,
    validate_node_def,
    validate_settings,
    validate_task_item,
    validate_ws_message,
)

__version__ = "0.1.0"
__all__ = [
    "BaseFeed",
    "ComfywireConfig",
    "ContractReader",
    "ExecutionMessage",
    "HistoryTaskItem",
    "InMemoryFeed",
    "InputSpec",
    "NodeDef",
    "NodeDefRegistry",
    "PendingTaskItem",
    "QueueSnapshot",
    "RunningTaskItem",
    "Settings",
    "TaskItem",
    "ValidationFailure",
    "ValidationResult",
    "WsMessage",
    "get_config",
    "load_config",
    "read_history",
    "read_node_defs",
    "read_queue",
    "validate",
    "validate_execution_message",
    "validate_node_def",
    "validate_settings",
    "validate_task_item",
    "validate_ws_message",
]
