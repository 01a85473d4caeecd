"""A publish queue held entirely in memory."""

from __future__ import annotations

import io
import threading
from collections import deque
from typing import BinaryIO, Deque, List

from .base import Entry, Queue, QueueData, QueueEmpty


def _read_all(data: QueueData) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    try:
        return data.read()
    except OSError as err:
        raise OSError(f"Queue.Push failed to read into buffer: {err}") from err


class MemoryQueue(Queue, Entry):
    """In-memory queue.

    The queue is its own entry: the entry always refers to the first item.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: Deque[bytes] = deque()
        self._waiting: List[threading.Event] = []
        self._waiting_for_empty: List[threading.Event] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def wait(self) -> threading.Event:
        """Return an event set once something is in the queue."""
        event = threading.Event()
        with self._lock:
            if self._messages:
                event.set()
            else:
                self._waiting.append(event)
        return event

    def wait_for_empty(self) -> threading.Event:
        """Return an event set once the queue is empty."""
        event = threading.Event()
        with self._lock:
            if not self._messages:
                event.set()
            else:
                self._waiting_for_empty.append(event)
        return event

    def enqueue(self, data: QueueData) -> None:
        """Append an item to the queue."""
        payload = _read_all(data)
        with self._lock:
            self._messages.append(payload)
            for event in self._waiting:
                event.set()
            self._waiting.clear()

    def peek(self) -> Entry:
        """Return the entry for the oldest item."""
        with self._lock:
            if not self._messages:
                raise QueueEmpty()
        return self

    def reader(self) -> BinaryIO:
        """Return a stream over the first item."""
        with self._lock:
            if not self._messages:
                raise QueueEmpty()
            return io.BytesIO(self._messages[0])

    def leave(self) -> None:
        """Leave the first item in place (nothing to release)."""

    def remove(self) -> None:
        """Remove the first item; raises ``QueueEmpty`` if there was none."""
        self._remove_first()

    def quarantine(self) -> None:
        """Drop the first item, as memory offers nowhere to keep it aside."""
        self._remove_first()

    def _remove_first(self) -> None:
        with self._lock:
            initial_len = len(self._messages)
            if initial_len > 0:
                self._messages.popleft()
            if initial_len <= 1:
                for event in self._waiting_for_empty:
                    event.set()
                self._waiting_for_empty.clear()
                if initial_len == 0:
                    raise QueueEmpty()