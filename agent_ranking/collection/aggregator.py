"""
Thread-safe per-agent listing counter.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from agent_ranking.domain.listings import Listing


class Aggregator:
    """
    Owns the agent -> listing count map for one collection run. A new run
    starts from a new instance.

    All mutation happens under one lock, held for a single batch merge.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}
        self._batches_applied = 0
        self._listings_applied = 0

    def apply(self, batch: Iterable[Listing]) -> None:
        with self._lock:
            for listing in batch:
                self._counts[listing.agent_name] = self._counts.get(listing.agent_name, 0) + 1
                self._listings_applied += 1
            self._batches_applied += 1

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    @property
    def batches_applied(self) -> int:
        with self._lock:
            return self._batches_applied

    @property
    def listings_applied(self) -> int:
        with self._lock:
            return self._listings_applied
