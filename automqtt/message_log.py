"""Recording of received count messages to a file and/or a stream."""

from __future__ import annotations

import json
import sys
from typing import Any, BinaryIO, Optional, TextIO, Tuple


def _parse_count(payload: bytes) -> Tuple[int, Optional[Exception]]:
    """Extract the ``Count`` field (matched case-insensitively) from a JSON payload."""
    try:
        message: Any = json.loads(payload)
    except ValueError as err:
        return 0, err
    if message is None:
        return 0, None
    if not isinstance(message, dict):
        return 0, ValueError(f"cannot unmarshal {type(message).__name__} into Message")
    count = 0
    error: Optional[Exception] = None
    for key, value in message.items():
        if key.lower() != "count":
            continue
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < 2**64:
            count = value
        elif error is None:
            error = ValueError(f"cannot unmarshal {value!r} into Message.Count")
    return count, error


class MessageHandler:
    """Writes each received message, prefixed with its zero-padded count.

    Lines go to ``file_name`` when ``write_to_disk`` is true; messages are
    echoed to ``stream`` (stdout by default) when ``write_to_stdout`` is true.
    """

    def __init__(
        self,
        write_to_disk: bool,
        file_name: str,
        write_to_stdout: bool,
        stream: Optional[TextIO] = None,
    ):
        self._write_to_stdout = write_to_stdout
        self._stream = stream
        self._file: Optional[BinaryIO] = open(file_name, "wb") if write_to_disk else None

    def _out(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def __enter__(self) -> "MessageHandler":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the output file, if one is open."""
        if self._file is None:
            return
        try:
            self._file.close()
        except OSError as err:
            self._out().write(f"ERROR closing file: {err}\n")
        self._file = None

    def handle(self, payload: bytes) -> None:
        """Record one received message payload."""
        payload = bytes(payload)
        text = payload.decode("utf-8", errors="replace")
        count, err = _parse_count(payload)
        if err is not None:
            self._out().write(f"Message could not be parsed ({text}): {err}\n")
        if self._file is not None:
            try:
                self._file.write(f"{count:09d} ".encode() + payload + b"\n")
                self._file.flush()
            except OSError as write_err:
                self._out().write(f"ERROR writing to file: {write_err}\n")
        if self._write_to_stdout:
            self._out().write(f"received message: {text}\n")