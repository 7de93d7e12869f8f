"""Registry of validated node definitions."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional

from ..config import ComfywireConfig
from ..nodedefs import NodeDef
from ..validation import ErrorSink, validate_node_def

logger = logging.getLogger(__name__)


class NodeDefRegistry:
    """Node definitions keyed by node type name.

    Built from an ``/object_info`` payload; entries that fail validation are
    left out and their names kept in ``rejected``.
    """

    def __init__(self) -> None:
        self._defs: Dict[str, NodeDef] = {}
        self.rejected: List[str] = []

    @classmethod
    def from_object_info(
        cls,
        payload: Mapping[str, Any],
        on_error: Optional[ErrorSink] = None,
        config: Optional[ComfywireConfig] = None,
    ) -> "NodeDefRegistry":
        registry = cls()
        for name, raw in payload.items():
            registry.register(name, raw, on_error=on_error, config=config)
        logger.info(
            f"Loaded {len(registry)} node definitions, rejected {len(registry.rejected)}"
        )
        return registry

    def register(
        self,
        name: str,
        raw: Any,
        on_error: Optional[ErrorSink] = None,
        config: Optional[ComfywireConfig] = None,
    ) -> Optional[NodeDef]:
        """Validate ``raw`` and add it under ``name``; ``None`` if rejected."""
        node_def = validate_node_def(raw, on_error=on_error, config=config)
        if node_def is None:
            self.rejected.append(name)
            return None
        if node_def.name != name:
            logger.debug(f"Node definition {node_def.name!r} registered as {name!r}")
        self._defs[name] = node_def
        return node_def

    def get(self, name: str) -> Optional[NodeDef]:
        return self._defs.get(name)

    def names(self) -> List[str]:
        return list(self._defs)

    def by_category(self) -> Dict[str, List[NodeDef]]:
        """Definitions grouped by category, in registration order."""
        grouped: Dict[str, List[NodeDef]] = {}
        for node_def in self._defs.values():
            grouped.setdefault(node_def.category, []).append(node_def)
        return grouped

    def visible(
        self, show_deprecated: bool = False, show_experimental: bool = True
    ) -> List[NodeDef]:
        """Definitions a node picker would list."""
        return [
            d
            for d in self._defs.values()
            if (show_deprecated or not d.is_deprecated)
            and (show_experimental or not d.is_experimental)
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._defs

    def __len__(self) -> int:
        return len(self._defs)

    def __iter__(self) -> Iterator[NodeDef]:
        return iter(self._defs.values())


__all__ = ["NodeDefRegistry"]
