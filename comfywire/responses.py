"""Smaller REST response bodies: ``/prompt``, ``/system_stats``, users."""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Union

from pydantic import StrictBool, StrictInt, StrictStr

from .primitives import FrozenList, Number, WireModel

EmbeddingsResponse = FrozenList[StrictStr]
ExtensionsResponse = FrozenList[StrictStr]
UserData = FrozenList[FrozenList[StrictStr]]


class PromptExecInfo(WireModel):
    queue_remaining: Optional[Number] = None


class PromptResponse(WireModel):
    """Reply to ``POST /prompt``."""

    # Older servers send a list of messages, current ones a per-node mapping.
    node_errors: Optional[Union[FrozenList[StrictStr], Dict[str, Any]]] = None
    prompt_id: Optional[StrictStr] = None
    exec_info: Optional[PromptExecInfo] = None


class SystemInfo(WireModel):
    os: StrictStr
    python_version: StrictStr
    embedded_python: StrictBool
    comfyui_version: StrictStr
    pytorch_version: StrictStr
    argv: FrozenList[StrictStr]


class DeviceStats(WireModel):
    name: StrictStr
    type: StrictStr
    index: Optional[StrictInt] = None
    vram_total: Number
    vram_free: Number
    torch_vram_total: Number
    torch_vram_free: Number


class SystemStats(WireModel):
    system: SystemInfo
    devices: FrozenList[DeviceStats]


class User(WireModel):
    storage: Literal["server", "browser"]
    migrated: StrictBool
    users: Dict[str, Any]


__all__ = [
    "EmbeddingsResponse",
    "ExtensionsResponse",
    "UserData",
    "PromptExecInfo",
    "PromptResponse",
    "SystemInfo",
    "DeviceStats",
    "SystemStats",
    "User",
]
