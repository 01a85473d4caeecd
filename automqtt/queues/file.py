"""A publish queue that keeps every item in its own file.

Items are ordered by file modification time, so ordering may suffer where
items arrive faster than the file system's timestamp resolution; ties are
broken by file name, which starts with the creation time.
"""

from __future__ import annotations

import fnmatch
import os
import shutil
import tempfile
import threading
import time
from typing import BinaryIO, List, Optional

from .base import Entry, Queue, QueueData, QueueEmpty

CORRUPT_EXTENSION = ".CORRUPT"


class FileEntry(Entry):
    """An item of a ``FileQueue``, backed by an open file."""

    def __init__(self, file: BinaryIO, path: str):
        self._file = file
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def reader(self) -> BinaryIO:
        """Return the open file."""
        return self._file

    def leave(self) -> None:
        """Close the file, leaving the item in the queue."""
        self._file.close()

    def remove(self) -> None:
        """Close and delete the file."""
        close_error = self._close()
        os.remove(self._path)
        if close_error is not None:
            raise close_error

    def quarantine(self) -> None:
        """Rename the file out of the queue, deleting it if renaming fails."""
        close_error = self._close()
        try:
            os.rename(self._path, self._path + CORRUPT_EXTENSION)
        except OSError as err:
            try:
                os.remove(self._path)
            except OSError:
                raise err
            raise OSError(f"rename failed so file deleted: {err}") from err
        if close_error is not None:
            raise close_error

    def _close(self) -> Optional[OSError]:
        try:
            self._file.close()
        except OSError as err:
            return err
        return None


class FileQueue(Queue):
    """File-based queue storing items in ``path`` as ``<prefix>*<extension>``."""

    def __init__(self, path: str, prefix: str = "", extension: str = ""):
        if extension and not extension.startswith("."):
            extension = "." + extension
        path = os.fspath(path)

        try:
            os.stat(path)
        except OSError as err:
            raise OSError(f"stat on folder failed: {err}") from err

        probe = os.path.join(path, prefix + "TEST" + extension)
        try:
            with open(probe, "wb") as f:
                f.write(b"test")
        except OSError as err:
            raise OSError(f"failed to write test file to specified folder: {err}") from err
        try:
            with open(probe, "rb") as f:
                f.read()
        except OSError as err:
            raise OSError(f"failed to read test file from specified folder: {err}") from err
        try:
            os.remove(probe)
        except OSError as err:
            raise OSError(f"failed to remove test file from specified folder: {err}") from err

        self._lock = threading.Lock()
        self._path = path
        self._prefix = prefix
        self._extension = extension
        self._waiting: List[threading.Event] = []
        self._waiting_for_empty: List[threading.Event] = []
        try:
            self._empty = self._oldest_entry() is None
        except OSError as err:
            raise OSError(f"failed checking for oldest entry: {err}") from err

    @property
    def path(self) -> str:
        return self._path

    @property
    def extension(self) -> str:
        return self._extension

    def wait(self) -> threading.Event:
        """Return an event set once something is in the queue."""
        event = threading.Event()
        with self._lock:
            if not self._empty:
                event.set()
            else:
                self._waiting.append(event)
        return event

    def wait_for_empty(self) -> threading.Event:
        """Return an event set once the queue is found to be empty."""
        event = threading.Event()
        with self._lock:
            if self._empty:
                event.set()
            else:
                self._waiting_for_empty.append(event)
        return event

    def enqueue(self, data: QueueData) -> None:
        """Write an item to a new file in the queue folder."""
        with self._lock:
            self._put(data)
            if self._empty:
                self._empty = False
                for event in self._waiting:
                    event.set()
                self._waiting.clear()

    def peek(self) -> Entry:
        """Open the oldest item in the queue."""
        with self._lock:
            if self._empty:
                raise QueueEmpty()
            oldest = self._oldest_entry()
            if oldest is None:
                self._empty = True
                for event in self._waiting_for_empty:
                    event.set()
                self._waiting_for_empty.clear()
                raise QueueEmpty()
            return FileEntry(open(oldest, "rb"), oldest)

    def _put(self, data: QueueData) -> None:
        fd, name = tempfile.mkstemp(
            suffix=self._extension,
            prefix=f"{self._prefix}{time.time_ns():020d}-",
            dir=self._path,
        )
        try:
            with os.fdopen(fd, "wb") as f:
                if isinstance(data, (bytes, bytearray, memoryview)):
                    f.write(data)
                else:
                    shutil.copyfileobj(data, f)
        except BaseException:
            try:
                os.remove(name)
            except OSError:
                pass
            raise

    def _oldest_entry(self) -> Optional[str]:
        pattern = self._prefix + "*" + self._extension
        oldest: Optional[str] = None
        oldest_time: Optional[int] = None
        with os.scandir(self._path) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            if entry.is_dir() or not fnmatch.fnmatchcase(entry.name, pattern):
                continue
            try:
                mtime = entry.stat().st_mtime_ns
            except FileNotFoundError:
                continue
            if oldest_time is not None and mtime >= oldest_time:
                continue
            oldest = os.path.join(self._path, entry.name)
            oldest_time = mtime
        return oldest