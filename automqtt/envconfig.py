"""Settings for the demo publisher and subscriber, read from environment variables."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional
from urllib.parse import urlsplit

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_PUB_SERVER_URL = "pubdemo_serverURL"
_PUB_CLIENT_ID = "pubdemo_clientID"
_PUB_TOPIC = "pubdemo_topic"
_PUB_QOS = "pubdemo_qos"
_PUB_KEEP_ALIVE = "pubdemo_keepAlive"
_PUB_CONNECT_RETRY_DELAY = "pubdemo_connectRetryDelay"
_PUB_DELAY_BETWEEN_MESSAGES = "pubdemo_delayBetweenMessages"
_PUB_SESSION_FOLDER = "pubdemo_sessionfolder"
_PUB_PRINT_MESSAGES = "pubdemo_printMessages"
_PUB_DEBUG = "pubdemo_debug"

_SUB_SERVER_URL = "subdemo_serverURL"
_SUB_CLIENT_ID = "subdemo_clientID"
_SUB_TOPIC = "subdemo_topic"
_SUB_QOS = "subdemo_qos"
_SUB_KEEP_ALIVE = "subdemo_keepAlive"
_SUB_CONNECT_RETRY_DELAY = "subdemo_connectRetryDelay"
_SUB_SESSION_FOLDER = "subdemo_sessionfolder"
_SUB_WRITE_TO_STDOUT = "subdemo_writeToStdout"
_SUB_WRITE_TO_DISK = "subdemo_writeToDisk"
_SUB_OUTPUT_FILE = "subdemo_OutputFile"
_SUB_DEBUG = "subdemo_debug"


class ConfigError(ValueError):
    """Raised when a required environment variable is missing or invalid."""


def _environ(environ: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def string_from_env(key: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Return a variable that must be present and not blank."""
    value = _environ(environ).get(key, "")
    if not value:
        raise ConfigError(f"environmental variable {key} must not be blank")
    return value


def int_from_env(key: str, environ: Optional[Mapping[str, str]] = None) -> int:
    """Return a variable that must hold a 64-bit decimal integer."""
    text = string_from_env(key, environ)
    if not _INTEGER.fullmatch(text):
        raise ConfigError(f"environmental variable {key} must be an integer")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ConfigError(f"environmental variable {key} must be an integer")
    return value


def milliseconds_from_env(key: str, environ: Optional[Mapping[str, str]] = None) -> timedelta:
    """Return a variable holding a number of milliseconds, as a duration."""
    return timedelta(milliseconds=int_from_env(key, environ))


def boolean_from_env(key: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return a variable holding TRUE/T/1 or FALSE/F/0 (any case)."""
    text = string_from_env(key, environ)
    upper = text.upper()
    if upper in ("TRUE", "T", "1"):
        return True
    if upper in ("FALSE", "F", "0"):
        return False
    raise ConfigError(f"environmental variable {key} be a valid boolean option (is {text})")


def _url_from_env(key: str, environ: Optional[Mapping[str, str]]) -> str:
    text = string_from_env(key, environ)
    try:
        urlsplit(text).port
    except ValueError as err:
        raise ConfigError(f"environmental variable {key} must be a valid URL ({err})") from err
    return text


@dataclass(frozen=True)
class PublisherConfig:
    """Settings of the demo publisher."""

    server_url: str
    client_id: str
    topic: str
    qos: int
    keep_alive: int
    connect_retry_delay: timedelta
    delay_between_messages: timedelta
    session_folder: str
    print_messages: bool
    debug: bool


@dataclass(frozen=True)
class SubscriberConfig:
    """Settings of the demo subscriber."""

    server_url: str
    client_id: str
    topic: str
    qos: int
    keep_alive: int
    connect_retry_delay: timedelta
    session_folder: str
    write_to_stdout: bool
    write_to_disk: bool
    output_file_name: str
    debug: bool


def publisher_config_from_env(environ: Optional[Mapping[str, str]] = None) -> PublisherConfig:
    """Read the publisher settings from ``pubdemo_*`` variables."""
    env = _environ(environ)
    server_url = _url_from_env(_PUB_SERVER_URL, env)
    client_id = string_from_env(_PUB_CLIENT_ID, env)
    topic = string_from_env(_PUB_TOPIC, env)
    qos = int_from_env(_PUB_QOS, env) & 0xFF
    keep_alive = int_from_env(_PUB_KEEP_ALIVE, env) & 0xFFFF
    session_folder = env.get(_PUB_SESSION_FOLDER, "")
    connect_retry_delay = milliseconds_from_env(_PUB_CONNECT_RETRY_DELAY, env)
    delay_between_messages = milliseconds_from_env(_PUB_DELAY_BETWEEN_MESSAGES, env)
    print_messages = boolean_from_env(_PUB_PRINT_MESSAGES, env)
    debug = boolean_from_env(_PUB_DEBUG, env)
    return PublisherConfig(
        server_url=server_url,
        client_id=client_id,
        topic=topic,
        qos=qos,
        keep_alive=keep_alive,
        connect_retry_delay=connect_retry_delay,
        delay_between_messages=delay_between_messages,
        session_folder=session_folder,
        print_messages=print_messages,
        debug=debug,
    )


def subscriber_config_from_env(environ: Optional[Mapping[str, str]] = None) -> SubscriberConfig:
    """Read the subscriber settings from ``subdemo_*`` variables.

    The output file name is only required when writing to disk.
    """
    env = _environ(environ)
    server_url = _url_from_env(_SUB_SERVER_URL, env)
    client_id = string_from_env(_SUB_CLIENT_ID, env)
    topic = string_from_env(_SUB_TOPIC, env)
    qos = int_from_env(_SUB_QOS, env) & 0xFF
    keep_alive = int_from_env(_SUB_KEEP_ALIVE, env) & 0xFFFF
    connect_retry_delay = milliseconds_from_env(_SUB_CONNECT_RETRY_DELAY, env)
    session_folder = env.get(_SUB_SESSION_FOLDER, "")
    write_to_stdout = boolean_from_env(_SUB_WRITE_TO_STDOUT, env)
    write_to_disk = boolean_from_env(_SUB_WRITE_TO_DISK, env)
    try:
        output_file_name = string_from_env(_SUB_OUTPUT_FILE, env)
    except ConfigError:
        if write_to_disk:
            raise
        output_file_name = ""
    debug = boolean_from_env(_SUB_DEBUG, env)
    return SubscriberConfig(
        server_url=server_url,
        client_id=client_id,
        topic=topic,
        qos=qos,
        keep_alive=keep_alive,
        connect_retry_delay=connect_retry_delay,
        session_folder=session_folder,
        write_to_stdout=write_to_stdout,
        write_to_disk=write_to_disk,
        output_file_name=output_file_name,
        debug=debug,
    )