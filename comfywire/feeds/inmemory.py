"""In-memory feed for testing and offline checks."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, AsyncIterator, Deque, Dict, Iterable, List, Optional

from .base import BaseFeed


class InMemoryFeed(BaseFeed):
    """Serves canned payloads and a queue of frames."""

    def __init__(
        self,
        queue: Optional[Dict[str, Any]] = None,
        history: Optional[Dict[str, Any]] = None,
        object_info: Optional[Dict[str, Any]] = None,
        frames: Optional[Iterable[Any]] = None,
    ) -> None:
        self.queue = queue or {"queue_running": [], "queue_pending": []}
        self.history = history or {}
        self.object_info = object_info or {}
        self._frames: Deque[Any] = deque(frames or ())
        self._lock = asyncio.Lock()
        self.interrupted: List[Optional[str]] = []

    async def push_frame(self, frame: Any) -> None:
        async with self._lock:
            self._frames.append(frame)

    async def fetch_queue(self) -> Dict[str, Any]:
        return self.queue

    async def fetch_history(self, max_items: Optional[int] = None) -> Dict[str, Any]:
        if max_items is None:
            return self.history
        # History is kept oldest first; the limit keeps the newest entries.
        keys = list(self.history)[-max_items:] if max_items else []
        return {key: self.history[key] for key in keys}

    async def fetch_object_info(self) -> Dict[str, Any]:
        return self.object_info

    async def frames(self, lifespan: Optional[float] = None) -> AsyncIterator[Any]:
        """Yield queued frames; stop when drained unless a lifespan is set.

        Args:
            lifespan: Keep polling for pushed frames for this many seconds.
        """
        start_time = asyncio.get_event_loop().time() if lifespan else None

        while True:
            async with self._lock:
                pending = bool(self._frames)
                frame = self._frames.popleft() if pending else None
            if pending:
                yield frame
                continue
            if start_time is None:
                break
            if asyncio.get_event_loop().time() - start_time >= lifespan:
                break
            await asyncio.sleep(0.1)

    async def interrupt(self, prompt_id: Optional[str] = None) -> None:
        """Record the interrupt request."""
        self.interrupted.append(prompt_id)
