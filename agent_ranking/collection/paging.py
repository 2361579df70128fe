"""
Page count resolution for a paginated listing feed.
"""

from __future__ import annotations

import logging

import requests
from pydantic import ValidationError

from agent_ranking.collection.errors import ResolutionError
from agent_ranking.domain.listings import FeedEndpoint
from agent_ranking.logging_utils import log_event
from agent_ranking.schemas.feed import FeedResponse

logger = logging.getLogger(__name__)


class PagingResolver:
    """
    Reads ``Paging.AantalPaginas`` from the first page of a feed.
    """

    def __init__(self, *, session: requests.Session, timeout_seconds: float) -> None:
        self._session = session
        self._timeout_seconds = timeout_seconds

    def resolve(self, endpoint: FeedEndpoint) -> int:
        """
        Return the total page count, or raise ``ResolutionError``.
        """

        try:
            response = self._session.get(
                endpoint.base_url,
                params=endpoint.params_for(1),
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            raise self._fail(endpoint, f"transport error: {exc}") from exc

        if response.status_code != 200:
            raise self._fail(endpoint, f"unexpected status={response.status_code}")

        try:
            body = FeedResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise self._fail(endpoint, f"undecodable response: {exc}") from exc

        page_count = body.paging.page_count if body.paging is not None else None
        if page_count is None:
            raise self._fail(endpoint, "response carries no paging metadata")
        if page_count < 1:
            raise self._fail(endpoint, f"non-positive page count={page_count}")

        log_event(
            logger,
            logging.INFO,
            "page_count_resolved",
            feed=endpoint.name,
            page_count=page_count,
        )
        return page_count

    @staticmethod
    def _fail(endpoint: FeedEndpoint, reason: str) -> ResolutionError:
        log_event(
            logger,
            logging.ERROR,
            "page_count_resolution_failed",
            feed=endpoint.name,
            url=endpoint.describe(1),
            reason=reason,
        )
        return ResolutionError(endpoint.name, reason)
