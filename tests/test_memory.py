import io

import pytest

from automqtt.queues.base import QueueEmpty
from automqtt.queues.memory import MemoryQueue

ENTRY_FORMAT = "Queue entry {} for testing"


def test_memory_queue():
    q = MemoryQueue()

    with pytest.raises(QueueEmpty):
        q.peek()

    not_empty = q.wait()
    assert not not_empty.is_set()

    q.enqueue(b"This is a test")
    assert not_empty.wait(1.0)

    for i in range(10):
        q.enqueue(ENTRY_FORMAT.format(i).encode())

    q.peek().remove()

    for i in range(10):
        entry = q.peek()
        data = entry.reader().read()
        entry.remove()
        assert data == ENTRY_FORMAT.format(i).encode()

    with pytest.raises(QueueEmpty):
        q.peek()


def test_leave_and_quarantine():
    q = MemoryQueue()

    with pytest.raises(QueueEmpty):
        q.peek()

    q.enqueue(b"This is a test")

    q.peek().leave()
    entry = q.peek()
    assert entry.reader().read() == b"This is a test"
    entry.quarantine()

    with pytest.raises(QueueEmpty):
        q.peek()


def test_enqueue_from_stream():
    q = MemoryQueue()
    q.enqueue(io.BytesIO(b"streamed"))
    assert q.peek().reader().read() == b"streamed"
    assert len(q) == 1


def test_wait_on_non_empty_queue_is_already_set():
    q = MemoryQueue()
    q.enqueue(b"x")
    assert q.wait().is_set()


def test_wait_for_empty():
    q = MemoryQueue()
    assert q.wait_for_empty().is_set()

    q.enqueue(b"a")
    q.enqueue(b"b")
    empty = q.wait_for_empty()
    assert not empty.is_set()

    q.peek().remove()
    assert not empty.is_set()
    q.peek().remove()
    assert empty.is_set()


def test_remove_and_reader_on_empty_queue_raise():
    q = MemoryQueue()
    with pytest.raises(QueueEmpty):
        q.remove()
    with pytest.raises(QueueEmpty):
        q.reader()


def test_leave_keeps_order():
    q = MemoryQueue()
    q.enqueue(b"first")
    q.enqueue(b"second")
    q.peek().leave()
    assert q.peek().reader().read() == b"first"
    assert len(q) == 2