"""Errors raised by the connection manager and the single-error dispatcher."""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable, Optional, Protocol


class Logger(Protocol):
    def println(self, *args: Any) -> None: ...

    def printf(self, fmt: str, *args: Any) -> None: ...


class _NullLogger:
    def println(self, *args: Any) -> None:
        pass

    def printf(self, fmt: str, *args: Any) -> None:
        pass


class ConnectionDownError(ConnectionError):
    """Raised when a request is made while the connection to the server is down."""

    def __init__(self, message: str = "connection with the MQTT server is currently down"):
        super().__init__(message)


class DisconnectError(Exception):
    """Reported when the server requests disconnection."""


class ConnackError(Exception):
    """Reported when the server denies the connection in its CONNACK packet."""

    def __init__(self, reason_code: int, reason: str, err: Optional[BaseException]):
        super().__init__(f"server denied connect (reason: {reason_code}): {err}")
        self.reason_code = reason_code
        self.reason = reason
        self.err = err
        self.__cause__ = err


def new_connack_error(err: Optional[BaseException], connack: Any) -> ConnackError:
    """Build a ConnackError from the underlying error and the received CONNACK."""
    properties = getattr(connack, "properties", None)
    reason = ""
    if properties is not None:
        reason = getattr(properties, "reason_string", "") or ""
    return ConnackError(connack.reason_code, reason, err)


class ErrorHandler:
    """Passes only the first connection error of a connection to ``errors``.

    The user's client-error callback runs at most once, in its own thread.
    """

    def __init__(
        self,
        errors: "queue.Queue[BaseException]",
        debug: Optional[Logger] = None,
        on_client_error: Optional[Callable[[BaseException], None]] = None,
        on_server_disconnect: Optional[Callable[[Any], None]] = None,
    ):
        self._debug: Logger = debug if debug is not None else _NullLogger()
        self._lock = threading.Lock()
        self._errors: Optional["queue.Queue[BaseException]"] = errors
        self._user_on_client_error = on_client_error
        self._user_on_server_disconnect = on_server_disconnect

    def shutdown(self) -> None:
        """Stop any further errors from being passed on."""
        with self._lock:
            self._errors = None

    def on_client_error(self, err: BaseException) -> None:
        """Handle an error from the client; every error is assumed to be fatal."""
        if self.handle_error(err) and self._user_on_client_error is not None:
            _run_in_background(self._user_on_client_error, err)

    def on_server_disconnect(self, disconnect: Any) -> None:
        """Handle a DISCONNECT sent by the server."""
        self.handle_error(
            DisconnectError(f"server requested disconnect (reason: {disconnect.reason_code})")
        )
        if self._user_on_server_disconnect is not None:
            _run_in_background(self._user_on_server_disconnect, disconnect)

    def handle_error(self, err: BaseException) -> bool:
        """Pass ``err`` on if it is the first one seen; return whether it was."""
        with self._lock:
            errors, self._errors = self._errors, None
        if errors is None:
            self._debug.printf("handleError received extra error: %s", err)
            return False
        self._debug.printf("handleError received error: %s", err)
        errors.put(err)
        self._debug.printf("handleError passed error on: %s", err)
        return True


def _run_in_background(fn: Callable[[Any], None], arg: Any) -> None:
    threading.Thread(target=fn, args=(arg,), daemon=True).start()