"""Bounded polling for conditions that settle over time."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class PollResult:
    """Outcome of a poll.

    Attributes:
        satisfied: Whether the predicate became true before the ceiling
        elapsed: Seconds waited, counted in whole intervals
        attempts: Number of times the predicate was evaluated
    """

    satisfied: bool
    elapsed: float
    attempts: int


def poll_until(
    predicate: Callable[[], bool],
    *,
    interval: float,
    timeout: float,
    on_wait: Callable[[float], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult:
    """Evaluate ``predicate`` every ``interval`` seconds until it holds.

    The predicate is checked before each sleep, so a condition that is already
    true returns without waiting. Elapsed time is accumulated from the interval
    rather than read from a clock.

    Args:
        predicate: Condition to wait for
        interval: Seconds between evaluations
        timeout: Ceiling in seconds; the last evaluation happens at or after it
        on_wait: Called with the elapsed seconds before each sleep
        sleep: Sleep function, replaceable in tests

    Returns:
        PollResult describing whether the condition was met
    """
    elapsed = 0.0
    attempts = 0
    while True:
        attempts += 1
        if predicate():
            return PollResult(satisfied=True, elapsed=elapsed, attempts=attempts)
        if elapsed >= timeout:
            return PollResult(satisfied=False, elapsed=elapsed, attempts=attempts)
        if on_wait:
            on_wait(elapsed)
        sleep(interval)
        elapsed += interval
