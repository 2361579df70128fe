"""
Retry delay policies for rate-limited feed pages.
"""

from __future__ import annotations

from collections.abc import Callable

BackoffPolicy = Callable[[int], float]


def fixed_backoff(seconds: float) -> BackoffPolicy:
    """
    Same delay after every failed attempt.
    """

    delay = max(0.0, seconds)

    def policy(attempt: int) -> float:
        return delay

    return policy


def exponential_backoff(
    initial_seconds: float,
    multiplier: float,
    max_seconds: float | None = None,
) -> BackoffPolicy:
    """
    ``initial * multiplier ** (attempt - 1)``, optionally capped.

    ``attempt`` is the 1-based number of the attempt that just failed.
    """

    initial = max(0.0, initial_seconds)
    factor = max(1.0, multiplier)

    def policy(attempt: int) -> float:
        delay = initial * (factor ** max(0, attempt - 1))
        if max_seconds is not None:
            delay = min(delay, max_seconds)
        return delay

    return policy


def backoff_from_settings(backoff_seconds: float, backoff_multiplier: float) -> BackoffPolicy:
    if backoff_multiplier <= 1.0:
        return fixed_backoff(backoff_seconds)
    return exponential_backoff(backoff_seconds, backoff_multiplier)
