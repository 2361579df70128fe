"""
Fan-in barrier for the page units of one collection run.
"""

from __future__ import annotations

import threading

from agent_ranking.collection.errors import BarrierError, BarrierTimeoutError
from agent_ranking.domain.listings import PageOutcome


class CompletionBarrier:
    """
    Releases waiters once every scheduled page has reported an outcome.

    Each page must arrive exactly once, whether it was aggregated or dropped.
    """

    def __init__(self, *, target: int) -> None:
        if target < 0:
            raise ValueError("Barrier target must be non-negative.")
        self._target = target
        self._condition = threading.Condition()
        self._outcomes: dict[int, PageOutcome] = {}

    @property
    def target(self) -> int:
        return self._target

    @property
    def arrived(self) -> int:
        with self._condition:
            return len(self._outcomes)

    def arrive(self, page: int, error: str | None = None) -> None:
        outcome = PageOutcome(
            page=page,
            status="aggregated" if error is None else "dropped",
            error=error,
        )
        with self._condition:
            if page in self._outcomes:
                raise BarrierError(f"Page {page} already reported completion.")
            if len(self._outcomes) >= self._target:
                raise BarrierError(f"Barrier already complete ({self._target} pages).")
            self._outcomes[page] = outcome
            if len(self._outcomes) == self._target:
                self._condition.notify_all()

    def wait(self, timeout: float | None = None) -> list[PageOutcome]:
        """
        Block until all pages arrived; return their outcomes ordered by page.
        """

        with self._condition:
            done = self._condition.wait_for(
                lambda: len(self._outcomes) >= self._target,
                timeout=timeout,
            )
            if not done:
                raise BarrierTimeoutError(len(self._outcomes), self._target)
            return [self._outcomes[page] for page in sorted(self._outcomes)]
