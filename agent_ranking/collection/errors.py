"""
Exceptions raised by the listing collection pipeline.
"""

from __future__ import annotations


class CollectionError(RuntimeError):
    """
    Base class for collection failures.
    """


class ResolutionError(CollectionError):
    """
    Raised when the page count of a feed cannot be determined. Aborts the run.
    """

    def __init__(self, feed: str, reason: str) -> None:
        self.feed = feed
        self.reason = reason
        super().__init__(f"{feed}: could not resolve page count: {reason}")


class PageError(CollectionError):
    """
    Terminal failure for one page. The page is dropped, the run continues.
    """

    def __init__(self, page: int, message: str) -> None:
        self.page = page
        super().__init__(f"page={page}: {message}")


class TransportError(PageError):
    """
    Network failure while fetching a page.
    """


class DecodeError(PageError):
    """
    A 200 response whose body is not a valid feed page.
    """


class RetriesExhaustedError(PageError):
    """
    The page kept returning non-200 statuses until the attempt cap was hit.
    """

    def __init__(self, page: int, attempts: int, last_status: int) -> None:
        self.attempts = attempts
        self.last_status = last_status
        super().__init__(page, f"gave up after {attempts} attempt(s), last status={last_status}")


class BarrierError(CollectionError):
    """
    Raised when a completion barrier is signalled incorrectly.
    """


class BarrierTimeoutError(BarrierError):
    def __init__(self, arrived: int, target: int) -> None:
        self.arrived = arrived
        self.target = target
        super().__init__(f"Timed out waiting for pages: {arrived}/{target} completed.")


class FetchCancelledError(PageError):
    """
    The run gave up waiting for this page before its request was sent.
    """
