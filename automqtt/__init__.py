"""Reconnect backoff, publish queues, error dispatch and demo settings for MQTT clients."""

__version__ = "0.1.0"

__all__ = [
    "backoff",
    "envconfig",
    "errors",
    "message_log",
    "prefix_logger",
    "queues",
]