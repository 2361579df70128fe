"""
Bounded concurrency gate for outbound feed requests.
"""

from __future__ import annotations

import threading


class TokenPool:
    """
    Counting semaphore limiting how many feed requests are in flight at once.

    Capacity bounds concurrency only; request pacing is the fetcher's job.
    """

    def __init__(self, *, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("TokenPool capacity must be at least 1.")
        self._capacity = capacity
        self._semaphore = threading.BoundedSemaphore(capacity)
        self._lock = threading.Lock()
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        with self._lock:
            return self._peak_in_flight

    def acquire(self, timeout: float | None = None) -> bool:
        """
        Block until a slot is free. Returns False only when ``timeout`` elapses.
        """

        if not self._semaphore.acquire(timeout=timeout):
            return False
        with self._lock:
            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
        return True

    def release(self) -> None:
        with self._lock:
            if self._in_flight == 0:
                raise ValueError("TokenPool released more times than acquired.")
            self._in_flight -= 1
        self._semaphore.release()
