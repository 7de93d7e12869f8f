"""Base feed interface: where raw contract payloads come from."""

from __future__ import annotations

import abc
from typing import Any, AsyncIterator, Dict, Optional


class BaseFeed(metaclass=abc.ABCMeta):
    """Abstract source of raw, JSON-decoded server payloads.

    Concrete feeds wrap the HTTP and WebSocket endpoints of a server; they
    return bodies untouched and leave validation to the reader.
    """

    async def connect(self) -> None:
        """Open connection to the server (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Close connection to the server (no-op by default)."""
        pass

    @abc.abstractmethod
    async def fetch_queue(self) -> Dict[str, Any]:
        """Return the ``/queue`` body."""
        raise NotImplementedError

    @abc.abstractmethod
    async def fetch_history(self, max_items: Optional[int] = None) -> Dict[str, Any]:
        """Return the ``/history`` body."""
        raise NotImplementedError

    @abc.abstractmethod
    async def fetch_object_info(self) -> Dict[str, Any]:
        """Return the ``/object_info`` body."""
        raise NotImplementedError

    @abc.abstractmethod
    async def frames(self, lifespan: Optional[float] = None) -> AsyncIterator[Any]:
        """Yield decoded WebSocket frames.

        Args:
            lifespan: Maximum time in seconds to keep listening. If None, runs indefinitely.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def interrupt(self, prompt_id: Optional[str] = None) -> None:
        """Ask the server to stop a running prompt."""
        raise NotImplementedError
