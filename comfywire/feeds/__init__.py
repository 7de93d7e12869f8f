"""Sources of raw server payloads."""

from __future__ import annotations

from .base import BaseFeed
from .inmemory import InMemoryFeed

__all__ = ["BaseFeed", "InMemoryFeed"]
