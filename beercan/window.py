"""
Bounded FIFO window of captured messages.

Insertion always appends; once the window is full the oldest message is
evicted. A drain pass takes the whole generation out with take_all() and
hands back whatever it wants to keep with restore().
"""

from collections import deque
from typing import Iterable, Iterator, Optional

from beercan.models import CapturedMessage


class MessageWindow:
    """Size-bounded, arrival-ordered buffer of CapturedMessage."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._messages: deque[CapturedMessage] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._messages.maxlen

    def append(self, message: CapturedMessage) -> Optional[CapturedMessage]:
        """
        Append a message, evicting the oldest one if the window is full.

        Returns:
            The evicted message, or None.
        """
        evicted = None
        if len(self._messages) == self.capacity:
            evicted = self._messages[0]
        self._messages.append(message)
        return evicted

    def take_all(self) -> list[CapturedMessage]:
        """Remove and return every message, oldest first."""
        generation = list(self._messages)
        self._messages.clear()
        return generation

    def restore(self, messages: Iterable[CapturedMessage]) -> None:
        """
        Put messages back ahead of the current contents.

        Restored messages are older than anything that arrived meanwhile,
        so if the total exceeds capacity they are the first to go.
        """
        combined = list(messages) + list(self._messages)
        self._messages = deque(combined, maxlen=self.capacity)

    def snapshot(self) -> list[CapturedMessage]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[CapturedMessage]:
        return iter(list(self._messages))
