"""
Single-page fetch with slot gating, pacing and capped retry.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

import requests
from pydantic import ValidationError

from agent_ranking.collection.backoff import BackoffPolicy, fixed_backoff
from agent_ranking.collection.errors import (
    DecodeError,
    FetchCancelledError,
    RetriesExhaustedError,
    TransportError,
)
from agent_ranking.collection.token_pool import TokenPool
from agent_ranking.domain.listings import FeedEndpoint, PageBatch
from agent_ranking.logging_utils import log_event
from agent_ranking.schemas.feed import FeedResponse

logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Fetches and decodes one feed page.

    Every request holds a ``TokenPool`` slot for the pacing delay and the call
    itself. The slot is returned before the body is decoded or a retry waits.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        token_pool: TokenPool,
        timeout_seconds: float,
        pacing_seconds: float = 2.0,
        max_attempts: int = 5,
        backoff: BackoffPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self._session = session
        self._token_pool = token_pool
        self._timeout_seconds = timeout_seconds
        self._pacing_seconds = pacing_seconds
        self._max_attempts = max_attempts
        self._backoff = backoff or fixed_backoff(20.0)
        self._sleep = sleep

    def fetch(
        self,
        endpoint: FeedEndpoint,
        page: int,
        cancel: threading.Event | None = None,
    ) -> PageBatch:
        """
        Return the listings on ``page``.

        Raises ``TransportError``, ``DecodeError`` or ``RetriesExhaustedError``;
        all of them are terminal for this page only. Once ``cancel`` is set, no
        further request is sent and ``FetchCancelledError`` is raised instead.
        """

        last_status = 0
        for attempt in range(1, self._max_attempts + 1):
            if cancel is not None and cancel.is_set():
                raise FetchCancelledError(page, "run abandoned before request was sent")
            response = self._request(endpoint, page, cancel)

            if response.status_code == 200:
                return self._decode(endpoint, page, response)

            last_status = response.status_code
            if attempt >= self._max_attempts:
                break

            wait_seconds = self._backoff(attempt)
            log_event(
                logger,
                logging.WARNING,
                "page_rate_limited",
                feed=endpoint.name,
                page=page,
                status=last_status,
                attempt=attempt,
                max_attempts=self._max_attempts,
                wait_seconds=wait_seconds,
            )
            self._sleep(wait_seconds)

        log_event(
            logger,
            logging.ERROR,
            "page_retries_exhausted",
            feed=endpoint.name,
            page=page,
            status=last_status,
            attempts=self._max_attempts,
        )
        raise RetriesExhaustedError(page, self._max_attempts, last_status)

    def _request(
        self,
        endpoint: FeedEndpoint,
        page: int,
        cancel: threading.Event | None,
    ) -> requests.Response:
        self._token_pool.acquire()
        try:
            if self._pacing_seconds > 0:
                self._sleep(self._pacing_seconds)
            if cancel is not None and cancel.is_set():
                raise FetchCancelledError(page, "run abandoned before request was sent")
            return self._session.get(
                endpoint.base_url,
                params=endpoint.params_for(page),
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            log_event(
                logger,
                logging.ERROR,
                "page_transport_failed",
                feed=endpoint.name,
                page=page,
                url=endpoint.describe(page),
                error=str(exc),
            )
            raise TransportError(page, f"transport error: {exc}") from exc
        finally:
            self._token_pool.release()

    @staticmethod
    def _decode(endpoint: FeedEndpoint, page: int, response: requests.Response) -> PageBatch:
        try:
            body = FeedResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            log_event(
                logger,
                logging.ERROR,
                "page_decode_failed",
                feed=endpoint.name,
                page=page,
                error=str(exc),
            )
            raise DecodeError(page, f"undecodable response: {exc}") from exc

        batch = body.to_batch()
        log_event(
            logger,
            logging.DEBUG,
            "page_fetched",
            feed=endpoint.name,
            page=page,
            listings=len(batch),
        )
        return batch
