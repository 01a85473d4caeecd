"""Interfaces shared by the publish queues.

A queue holds encoded PUBLISH packets waiting to be sent. ``Queue.peek``
hands out the oldest item as an ``Entry``. The caller must finish with that
entry by calling exactly one of ``leave``, ``remove`` or ``quarantine``
before peeking again.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import BinaryIO, Union

QueueData = Union[bytes, bytearray, memoryview, BinaryIO]


class QueueEmpty(Exception):
    """Raised when an item is requested from an empty queue."""

    def __init__(self, message: str = "empty queue"):
        super().__init__(message)


class Entry(ABC):
    """Access to a single queued item.

    ``reader`` must not be used after ``leave``, ``remove`` or ``quarantine``.
    """

    @abstractmethod
    def reader(self) -> BinaryIO:
        """Return a binary stream over the item's contents."""

    @abstractmethod
    def leave(self) -> None:
        """Keep the item in the queue; the next peek returns it again."""

    @abstractmethod
    def remove(self) -> None:
        """Remove the item from the queue."""

    @abstractmethod
    def quarantine(self) -> None:
        """Flag the item as faulty and take it out of the queue."""


class Queue(ABC):
    """Storage for messages waiting to be published."""

    @abstractmethod
    def wait(self) -> threading.Event:
        """Return an event that is set once the queue holds something.

        The event is already set if the queue is not empty at the time of
        the call.
        """

    @abstractmethod
    def enqueue(self, data: QueueData) -> None:
        """Add an item, given as bytes or a readable binary stream."""

    @abstractmethod
    def peek(self) -> Entry:
        """Return the oldest item without removing it.

        Raises ``QueueEmpty`` if there is nothing queued. Not safe for
        concurrent use: two callers may receive the same entry.
        """