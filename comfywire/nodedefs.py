"""Node definitions served by ``/object_info``.

Each input of a node is described by an *input spec*: a type tag paired with
an options record, canonically ``[type, options]``. Servers and extensions
also send two shorthand forms which are expanded on validation:

* ``[type]`` becomes ``[type, {}]``;
* a bare ``type`` becomes ``[type, {}]`` for INT, FLOAT, BOOLEAN and STRING
  only. COMBO and custom types must be wrapped in a list.

Shapes are tried in that order (pair, single, bare) and variants in the order
INT, FLOAT, BOOLEAN, STRING, COMBO, custom; the first match wins. Option keys
that are not declared here are kept, since extensions rely on them surviving
a round trip.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Dict, List, Literal, Mapping, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    StrictBool,
    StrictStr,
    ValidationInfo,
    field_validator,
    model_serializer,
    model_validator,
)

from .constants import BUILTIN_INPUT_TYPES
from .primitives import FrozenList, Number, OpenWireModel, WireModel, residual_fields


class BaseInputOptions(OpenWireModel):
    """Options shared by every input type."""

    default: Any = None
    forceInput: Optional[StrictBool] = None


class IntInputOptions(BaseInputOptions):
    min: Optional[Number] = None
    max: Optional[Number] = None
    step: Optional[Number] = None
    # Some nodes pass a list of ints through an INT input.
    default: Optional[Union[Number, FrozenList[Number]]] = None


class FloatInputOptions(IntInputOptions):
    # ``False`` disables rounding; ``0`` is a precision and must stay a number.
    round: Optional[
        Annotated[Union[Number, Literal[False]], Field(union_mode="left_to_right")]
    ] = None


class BooleanInputOptions(BaseInputOptions):
    label_on: Optional[StrictStr] = None
    label_off: Optional[StrictStr] = None
    default: Optional[StrictBool] = None


class StringInputOptions(BaseInputOptions):
    default: Optional[StrictStr] = None
    multiline: Optional[StrictBool] = None
    dynamicPrompts: Optional[StrictBool] = None
    # Multiline only.
    defaultVal: Optional[StrictStr] = None
    placeholder: Optional[StrictStr] = None


class ComboInputOptions(BaseInputOptions):
    control_after_generate: Optional[StrictBool] = None
    image_upload: Optional[StrictBool] = None


def _pair_shape(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return {"type": value[0], "options": value[1]}
    return None


def _single_shape(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return {"type": value[0], "options": {}}
    return None


def _bare_shape(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, (list, tuple)):
        return None
    return {"type": value, "options": {}}


# Match order is part of the contract.
WIRE_SHAPES = (
    ("pair", _pair_shape),
    ("single", _single_shape),
    ("bare", _bare_shape),
)


class InputSpecBase(WireModel):
    """A ``(type, options)`` pair, normalized from any accepted wire shape."""

    allow_upcast: ClassVar[bool] = True

    type: Any
    options: BaseInputOptions = Field(default_factory=BaseInputOptions)

    @model_validator(mode="before")
    @classmethod
    def _normalize_wire_shape(cls, value: Any) -> Any:
        # Keyword construction and already validated instances.
        if isinstance(value, (dict, BaseModel)):
            return value
        for name, shape in WIRE_SHAPES:
            if name == "bare" and not cls.allow_upcast:
                continue
            normalized = shape(value)
            if normalized is not None:
                return normalized
        raise ValueError(
            f"{cls.__name__} expects [type, options] or [type], got {type(value).__name__}"
        )

    def _wire_type(self) -> Any:
        return self.type

    @model_serializer(mode="plain")
    def _to_wire(self) -> List[Any]:
        return [self._wire_type(), residual_fields(self.options)]

    def as_tuple(self) -> Tuple[Any, Dict[str, Any]]:
        """Canonical ``(type, options)`` form with only the keys received."""
        return self._wire_type(), residual_fields(self.options)


class IntInputSpec(InputSpecBase):
    type: Literal["INT"]
    options: IntInputOptions = Field(default_factory=IntInputOptions)


class FloatInputSpec(InputSpecBase):
    type: Literal["FLOAT"]
    options: FloatInputOptions = Field(default_factory=FloatInputOptions)


class BooleanInputSpec(InputSpecBase):
    type: Literal["BOOLEAN"]
    options: BooleanInputOptions = Field(default_factory=BooleanInputOptions)


class StringInputSpec(InputSpecBase):
    type: Literal["STRING"]
    options: StringInputOptions = Field(default_factory=StringInputOptions)


class ComboInputSpec(InputSpecBase):
    """Dropdown selection; the type position holds the list of choices."""

    allow_upcast: ClassVar[bool] = False

    type: FrozenList[Any]
    options: ComboInputOptions = Field(default_factory=ComboInputOptions)

    def _wire_type(self) -> Any:
        return list(self.type)

    @property
    def choices(self) -> List[Any]:
        return list(self.type)


class CustomInputSpec(InputSpecBase):
    """Any extension-defined type such as ``MODEL`` or ``IMAGE``."""

    allow_upcast: ClassVar[bool] = False

    type: StrictStr

    @field_validator("type")
    @classmethod
    def _reject_builtin_tag(cls, v: str) -> str:
        if v in BUILTIN_INPUT_TYPES:
            raise ValueError(f"{v!r} is a builtin input type, not a custom one")
        return v


def _reject_mapping(value: Any) -> Any:
    # Mappings are only accepted when a spec model is built by keyword.
    if isinstance(value, Mapping):
        raise ValueError("input spec must be [type, options], [type] or a bare type tag")
    return value


InputSpec = Annotated[
    Union[
        IntInputSpec,
        FloatInputSpec,
        BooleanInputSpec,
        StringInputSpec,
        ComboInputSpec,
        CustomInputSpec,
    ],
    Field(union_mode="left_to_right"),
    BeforeValidator(_reject_mapping),
]


class InputsSpec(WireModel):
    required: Optional[Dict[str, InputSpec]] = None
    optional: Optional[Dict[str, InputSpec]] = None
    # Not read by the client, but some extensions pass values through it.
    hidden: Optional[Dict[str, Any]] = None

    def all_inputs(self) -> Dict[str, InputSpecBase]:
        """Required inputs followed by optional ones."""
        merged: Dict[str, InputSpecBase] = dict(self.required or {})
        merged.update(self.optional or {})
        return merged


OutputType = Union[StrictStr, FrozenList[Any]]


class NodeDef(OpenWireModel):
    """Descriptor of one executable node type."""

    name: StrictStr
    display_name: StrictStr
    description: StrictStr
    category: StrictStr
    python_module: StrictStr
    deprecated: Optional[StrictBool] = None
    experimental: Optional[StrictBool] = None
    input: InputsSpec
    output: FrozenList[OutputType]
    output_is_list: FrozenList[StrictBool]
    output_name: FrozenList[StrictStr]
    output_tooltips: Optional[FrozenList[StrictStr]] = None
    output_node: StrictBool

    @model_validator(mode="after")
    def _check_output_arity(self, info: ValidationInfo) -> "NodeDef":
        context = info.context or {}
        if not context.get("check_output_arity", True):
            return self
        lengths = (len(self.output), len(self.output_is_list), len(self.output_name))
        if len(set(lengths)) > 1:
            raise ValueError(
                "output, output_is_list and output_name must have equal length, "
                f"got {lengths[0]}, {lengths[1]} and {lengths[2]}"
            )
        return self

    def output_slots(self) -> List[Tuple[OutputType, bool, str]]:
        """``(type, is_list, name)`` for every declared output slot."""
        return list(zip(self.output, self.output_is_list, self.output_name))

    @property
    def is_deprecated(self) -> bool:
        return bool(self.deprecated)

    @property
    def is_experimental(self) -> bool:
        return bool(self.experimental)


__all__ = [
    "BaseInputOptions",
    "IntInputOptions",
    "FloatInputOptions",
    "BooleanInputOptions",
    "StringInputOptions",
    "ComboInputOptions",
    "WIRE_SHAPES",
    "InputSpecBase",
    "IntInputSpec",
    "FloatInputSpec",
    "BooleanInputSpec",
    "StringInputSpec",
    "ComboInputSpec",
    "CustomInputSpec",
    "InputSpec",
    "InputsSpec",
    "OutputType",
    "NodeDef",
]
