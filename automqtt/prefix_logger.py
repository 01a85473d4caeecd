"""A logger that writes prefixed lines to a stream."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Optional, TextIO


@dataclass(frozen=True)
class PrefixLogger:
    """Writes each message as ``<prefix>:<message>`` to ``stream`` (stdout by default)."""

    prefix: str
    stream: Optional[TextIO] = None

    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def println(self, *args: Any) -> None:
        """Write the arguments separated by spaces, followed by a newline."""
        print(f"{self.prefix}:", *args, file=self._out())

    def printf(self, fmt: str, *args: Any) -> None:
        """Write a %-formatted message, adding a newline if it lacks one."""
        if fmt and not fmt.endswith("\n"):
            fmt += "\n"
        message = fmt % args if args else fmt
        self._out().write(f"{self.prefix}:{message}")