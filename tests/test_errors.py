import queue
import threading
from types import SimpleNamespace

from automqtt.errors import (
    ConnackError,
    ConnectionDownError,
    DisconnectError,
    ErrorHandler,
    new_connack_error,
)


class _RecordingLogger:
    def __init__(self):
        self.lines = []

    def println(self, *args):
        self.lines.append(" ".join(str(a) for a in args))

    def printf(self, fmt, *args):
        self.lines.append(fmt % args)


def test_connection_down_error_message():
    assert str(ConnectionDownError()) == "connection with the MQTT server is currently down"
    assert isinstance(ConnectionDownError(), ConnectionError)


def test_connack_error_fields_and_message():
    cause = ValueError("bad")
    connack = SimpleNamespace(reason_code=135, properties=SimpleNamespace(reason_string="not authorised"))
    err = new_connack_error(cause, connack)
    assert isinstance(err, ConnackError)
    assert err.reason_code == 135
    assert err.reason == "not authorised"
    assert err.err is cause
    assert err.__cause__ is cause
    assert str(err) == "server denied connect (reason: 135): bad"


def test_connack_error_without_properties():
    err = new_connack_error(RuntimeError("x"), SimpleNamespace(reason_code=5, properties=None))
    assert err.reason == ""
    assert err.reason_code == 5


def test_only_first_error_is_passed_on():
    errors = queue.Queue()
    logger = _RecordingLogger()
    handler = ErrorHandler(errors, debug=logger)
    first = OSError("first")
    assert handler.handle_error(first) is True
    assert handler.handle_error(OSError("second")) is False
    assert errors.get_nowait() is first
    assert errors.empty()
    assert any("extra error: second" in line for line in logger.lines)


def test_shutdown_stops_errors():
    errors = queue.Queue()
    handler = ErrorHandler(errors)
    handler.shutdown()
    assert handler.handle_error(OSError("late")) is False
    assert errors.empty()


def test_on_client_error_calls_user_callback_once():
    errors = queue.Queue()
    received = []
    called = threading.Event()

    def user_callback(err):
        received.append(err)
        called.set()

    handler = ErrorHandler(errors, on_client_error=user_callback)
    err = OSError("boom")
    handler.on_client_error(err)
    handler.on_client_error(OSError("again"))
    assert called.wait(2)
    assert errors.get_nowait() is err
    assert received == [err]


def test_on_server_disconnect_reports_disconnect_error():
    errors = queue.Queue()
    seen = []
    called = threading.Event()

    def user_callback(d):
        seen.append(d)
        called.set()

    handler = ErrorHandler(errors, on_server_disconnect=user_callback)
    disconnect = SimpleNamespace(reason_code=4)
    handler.on_server_disconnect(disconnect)
    err = errors.get_nowait()
    assert isinstance(err, DisconnectError)
    assert str(err) == "server requested disconnect (reason: 4)"
    assert called.wait(2)
    assert seen == [disconnect]


def test_server_disconnect_after_client_error_still_notifies_user():
    errors = queue.Queue()
    called = threading.Event()
    handler = ErrorHandler(errors, on_server_disconnect=lambda d: called.set())
    handler.on_client_error(OSError("first"))
    handler.on_server_disconnect(SimpleNamespace(reason_code=0))
    assert called.wait(2)
    assert str(errors.get_nowait()) == "first"
    assert errors.empty()