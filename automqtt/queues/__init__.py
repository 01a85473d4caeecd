"""Publish queues: the common interface plus memory and file implementations."""

__all__ = ["base", "file", "memory"]