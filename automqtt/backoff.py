"""Reconnection backoff strategies.

A backoff is a callable taking the attempt number and returning how long to
wait before that attempt. Attempt ``0`` is the delay before the very first
connection attempt and is always zero.
"""

from __future__ import annotations

import argparse
import random
import struct
import sys
from datetime import timedelta
from typing import Callable, Sequence, Union

Backoff = Callable[[int], timedelta]
DurationLike = Union[timedelta, int, float]

_MILLISECOND = timedelta(milliseconds=1)


def _to_timedelta(value: DurationLike) -> timedelta:
    """Accept a timedelta or a number of seconds."""
    if isinstance(value, timedelta):
        return value
    return timedelta(seconds=value)


def _float32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def rand_range(start: int, end: int) -> int:
    """Return a random integer in the inclusive range ``[start, end]``."""
    if end < start:
        raise ValueError(f"invalid range [{start}, {end}]")
    return random.randrange(end - start + 1) + start


def constant_backoff(delay: DurationLike) -> Backoff:
    """Backoff with a constant delay for every attempt after the first."""
    fixed = _to_timedelta(delay)

    def backoff(attempt: int) -> timedelta:
        if attempt <= 0:
            return timedelta(0)
        return fixed

    return backoff


def exponential_backoff(
    min_delay: DurationLike,
    max_delay: DurationLike,
    initial_max_delay: DurationLike,
    factor: float,
) -> Backoff:
    """Backoff returning a random delay between ``min_delay`` and a moving maximum.

    The moving maximum starts at ``initial_max_delay`` and is multiplied by
    ``factor`` for each further attempt, never exceeding ``max_delay``.
    """
    min_delay = _to_timedelta(min_delay)
    max_delay = _to_timedelta(max_delay)
    initial_max_delay = _to_timedelta(initial_max_delay)

    if min_delay <= timedelta(0):
        raise ValueError("min delay must NOT be less than or equal to: 0")
    if max_delay <= min_delay:
        raise ValueError("max delay must NOT be less than or equal to: min delay")
    if initial_max_delay < min_delay or max_delay < initial_max_delay:
        raise ValueError("initial max delay must be in range of: (min, max) delay")
    factor32 = _float32(factor)
    if factor32 <= 1:
        raise ValueError("factor must NOT be less than or equal to: 1")

    min_ms = min_delay // _MILLISECOND
    max_ms = max_delay // _MILLISECOND
    initial_max_ms = initial_max_delay // _MILLISECOND

    def max_for_attempt(attempt: int) -> int:
        moving_ms = initial_max_ms
        for _ in range(1, attempt):
            moving_ms = int(_float32(_float32(moving_ms) * factor32))
            if max_ms < moving_ms or moving_ms < min_ms:
                return max_ms
        return moving_ms

    def backoff(attempt: int) -> timedelta:
        if attempt <= 0:
            return timedelta(0)
        return timedelta(milliseconds=rand_range(min_ms, max_for_attempt(attempt)))

    return backoff


def default_exponential_backoff() -> Backoff:
    """Exponential backoff: 5s minimum, 10min maximum, 10s initial maximum, factor 1.5."""
    return exponential_backoff(
        timedelta(seconds=5),
        timedelta(minutes=10),
        timedelta(seconds=10),
        1.5,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Print the observed range of the default exponential backoff."""
    parser = argparse.ArgumentParser(
        description="Show the spread of delays produced by the default exponential backoff."
    )
    parser.add_argument(
        "--rounds",
        type=int,
        default=22,
        help="number of doubling rounds of attempts to sample (default: 22)",
    )
    args = parser.parse_args(argv)

    backoff = default_exponential_backoff()
    min_backoff = sys.maxsize
    max_backoff = 0
    total = 0

    print(f"Backoff for attempt '0'       : {backoff(0) // _MILLISECOND}")

    for round_no in range(args.rounds):
        for _ in range(1 << round_no):
            total += 1
            millis = backoff(total) // _MILLISECOND
            min_backoff = min(min_backoff, millis)
            max_backoff = max(max_backoff, millis)
        print("After % 8d iterations, min: %d, max: % 7d" % (total, min_backoff, max_backoff))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())