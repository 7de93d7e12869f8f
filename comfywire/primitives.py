"""Identifier types, output descriptors and model base classes."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, Tuple, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    SerializerFunctionWrapHandler,
    StrictFloat,
    StrictInt,
    StrictStr,
    WrapSerializer,
)

# JSON scalars are checked strictly: ``"5"`` is not a number and ``1`` is not
# a boolean.
Number = Union[StrictInt, StrictFloat]
NodeId = Union[StrictStr, StrictInt]
NodeType = StrictStr
PromptId = StrictStr
QueueIndex = StrictInt

T = TypeVar("T")


def _as_list(value: Any, handler: SerializerFunctionWrapHandler) -> List[Any]:
    return list(handler(value))


# Sequences are stored as tuples so a validated record cannot be edited in
# place; they dump back to lists.
FrozenList = Annotated[Tuple[T, ...], WrapSerializer(_as_list)]

__all__ = [
    "Number",
    "NodeId",
    "NodeType",
    "PromptId",
    "QueueIndex",
    "FrozenList",
    "WireModel",
    "OpenWireModel",
    "ResultItem",
    "OutputBundle",
    "residual_fields",
]


class WireModel(BaseModel):
    """Immutable record decoded from the wire; unknown keys are dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class OpenWireModel(BaseModel):
    """Immutable record that keeps unknown keys verbatim."""

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def extra_fields(self) -> Dict[str, Any]:
        """Keys present on the wire that this model does not declare."""
        return dict(self.model_extra or {})


def residual_fields(model: BaseModel) -> Dict[str, Any]:
    """Return the keys that were actually present on ``model``'s input.

    Declared fields left at their default are omitted and extra keys are
    kept, so the result mirrors the record that was validated.
    """
    declared = model.model_fields_set & set(type(model).model_fields)
    data = model.model_dump(include=declared) if declared else {}
    data.update(model.model_extra or {})
    return data


class ResultItem(WireModel):
    """Reference to one file produced by a node."""

    filename: StrictStr
    subfolder: Optional[StrictStr] = None
    type: StrictStr


class OutputBundle(OpenWireModel):
    """Outputs recorded for one node.

    Only ``images`` and ``audio`` are typed; other output kinds (``gifs``,
    ``text``, ``latents``...) pass through untouched.
    """

    images: Optional[FrozenList[ResultItem]] = None
    audio: Optional[FrozenList[ResultItem]] = None
