"""Staging buffer for incoming sensor messages."""

from __future__ import annotations

from collections import deque
from typing import Any, MutableSequence

__all__ = ["MessageBuffer"]


class MessageBuffer:
    """Collects messages as they arrive and hands them over in arrival order."""

    def __init__(self):
        self._pending: deque[Any] = deque()

    def push(self, item) -> None:
        """Queue one received message."""
        self._pending.append(item)

    def parse_data(self, data_buff: MutableSequence) -> int:
        """Append all queued messages to ``data_buff`` and clear the queue.

        Returns the number of messages moved.
        """
        count = len(self._pending)
        if count:
            data_buff.extend(self._pending)
            self._pending.clear()
        return count

    def __len__(self) -> int:
        return len(self._pending)