"""Validation entry points.

Every contract is checked through :func:`validate`, which never raises for
malformed input and returns a :class:`ValidationResult`. Two call styles sit
on top of it:

* result objects (:func:`validate_task_item` and friends), where the caller
  inspects ``success`` and decides what to do;
* a nullable return plus an ``on_error`` sink (:func:`validate_node_def`),
  used when definitions are loaded in bulk and a bad entry must only be
  reported.

Diagnostics are logged on this module's logger unless a sink is given.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .config import ComfywireConfig, get_config
from .constants import DEFAULT_PAYLOAD_PREVIEW_CHARS
from .events import WS_MESSAGE_MODELS, ExecutionMessage, WsMessage
from .nodedefs import NodeDef
from .settings import Settings
from .tasks import TaskItem

logger = logging.getLogger(__name__)

ErrorSink = Callable[[str], None]


class ValidationFailure(BaseModel):
    """Why a raw value was rejected. ``message`` is advisory, for logs."""

    label: str
    message: str
    errors: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_error(
        cls,
        label: str,
        raw: Any,
        error: ValidationError,
        preview_chars: int = DEFAULT_PAYLOAD_PREVIEW_CHARS,
    ) -> "ValidationFailure":
        return cls(
            label=label,
            message=f"Invalid {label}: {_preview(raw, preview_chars)}\n{error}",
            errors=error.errors(include_url=False, include_context=False),
        )


class ValidationResult(BaseModel):
    """Outcome of one validation: ``data`` on success, ``error`` otherwise."""

    success: bool
    data: Any = None
    error: Optional[ValidationFailure] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(cls, data: Any) -> "ValidationResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, failure: ValidationFailure) -> "ValidationResult":
        return cls(success=False, error=failure)

    def unwrap_or(self, default: Any = None) -> Any:
        return self.data if self.success else default


def _preview(raw: Any, limit: int) -> str:
    try:
        text = json.dumps(raw, default=repr)
    except (TypeError, ValueError):
        text = repr(raw)
    if limit and len(text) > limit:
        return text[:limit] + "..."
    return text


# Keyed by id(); the target is stored too so the id stays valid.
_ADAPTERS: Dict[int, Any] = {}


def _adapter(target: Any) -> TypeAdapter:
    cached = _ADAPTERS.get(id(target))
    if cached is None:
        cached = _ADAPTERS[id(target)] = (target, TypeAdapter(target))
    return cached[1]


def _context(config: ComfywireConfig) -> Dict[str, Any]:
    return {"check_output_arity": config.validation.check_output_arity}


def validate(
    target: Any,
    raw: Any,
    label: str,
    *,
    config: Optional[ComfywireConfig] = None,
    on_error: Optional[ErrorSink] = None,
) -> ValidationResult:
    """Validate ``raw`` against ``target`` (a model or type) without raising.

    On failure the diagnostic is passed to ``on_error`` when given, otherwise
    logged as a warning.
    """
    config = config or get_config()
    try:
        data = _adapter(target).validate_python(raw, context=_context(config))
    except ValidationError as e:
        failure = ValidationFailure.from_error(
            label, raw, e, config.validation.payload_preview_chars
        )
        if on_error is not None:
            on_error(failure.message)
        else:
            logger.warning(failure.message)
        return ValidationResult.fail(failure)
    logger.debug(f"Validated {label}")
    return ValidationResult.ok(data)


def validate_task_item(
    raw: Any,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> ValidationResult:
    """Validate one ``Pending``/``Running``/``History`` task item."""
    return validate(TaskItem, raw, "TaskItem", config=config, on_error=on_error)


def validate_node_def(
    raw: Any,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> Optional[NodeDef]:
    """Return the validated node definition, or ``None`` after reporting why."""
    result = validate(NodeDef, raw, "NodeDef", config=config, on_error=on_error)
    return result.data if result.success else None


def validate_execution_message(
    raw: Any,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> ValidationResult:
    """Validate a ``[tag, body]`` status-log entry."""
    return validate(
        ExecutionMessage, raw, "ExecutionMessage", config=config, on_error=on_error
    )


def validate_ws_message(
    raw: Any,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> ValidationResult:
    """Validate a WebSocket frame ``{"type": ..., "data": ...}``.

    The frame type selects the body model before the body is looked at.
    """
    frame_type = raw.get("type") if isinstance(raw, dict) else None
    model = WS_MESSAGE_MODELS.get(frame_type) if isinstance(frame_type, str) else None
    if model is None:
        message = f"Invalid WsMessage: unknown message type {frame_type!r}"
        if on_error is not None:
            on_error(message)
        else:
            logger.warning(message)
        return ValidationResult.fail(
            ValidationFailure(label="WsMessage", message=message)
        )
    result = validate(
        model,
        raw.get("data"),
        f"WsMessage[{frame_type}]",
        config=config,
        on_error=on_error,
    )
    if not result.success:
        return result
    return ValidationResult.ok(WsMessage(type=frame_type, data=result.data))


def validate_settings(
    raw: Any,
    on_error: Optional[ErrorSink] = None,
    config: Optional[ComfywireConfig] = None,
) -> ValidationResult:
    """Validate the settings map; unknown keys are kept."""
    return validate(Settings, raw, "Settings", config=config, on_error=on_error)


__all__ = [
    "ErrorSink",
    "ValidationFailure",
    "ValidationResult",
    "validate",
    "validate_task_item",
    "validate_node_def",
    "validate_execution_message",
    "validate_ws_message",
    "validate_settings",
]
