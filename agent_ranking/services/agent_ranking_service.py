"""
agent_ranking/services/agent_ranking_service.py

Service orchestration for collecting and serving agent rankings per feed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache

import requests

from agent_ranking.collection import (
    CollectionPipeline,
    PageFetcher,
    PagingResolver,
    TokenPool,
    backoff_from_settings,
)
from agent_ranking.config import (
    CollectionSettings,
    FundaAPISettings,
    get_collection_settings,
    get_funda_api_settings,
)
from agent_ranking.domain.listings import CollectionReport, FeedEndpoint

logger = logging.getLogger(__name__)

REGULAR_FEED = "regular"
GARDEN_FEED = "garden"


def build_feed_endpoints(settings: FundaAPISettings) -> dict[str, FeedEndpoint]:
    """
    Listings for sale, and the subset of those with a garden.
    """

    base_url = f"{settings.base_url.rstrip('/')}/{settings.require_api_key()}/"
    return {
        REGULAR_FEED: FeedEndpoint(
            name=REGULAR_FEED,
            base_url=base_url,
            search_type=settings.search_type,
            location_path=settings.location_path,
        ),
        GARDEN_FEED: FeedEndpoint(
            name=GARDEN_FEED,
            base_url=base_url,
            search_type=settings.search_type,
            location_path=settings.garden_location_path,
        ),
    }


class AgentRankingService:
    """
    Runs the collection pipeline for each feed and keeps the latest reports.

    Feeds run concurrently and share one ``TokenPool``: the upstream quota is
    per API key, not per query.
    """

    def __init__(
        self,
        *,
        feeds: dict[str, FeedEndpoint],
        settings: CollectionSettings,
        session: requests.Session | None = None,
        pipeline: CollectionPipeline | None = None,
    ) -> None:
        self._feeds = feeds
        self._settings = settings
        self._session = session or requests.Session()
        self._pipeline = pipeline or self._build_pipeline()
        self._lock = threading.Lock()
        self._latest: dict[str, CollectionReport] = {}

    @property
    def feed_names(self) -> list[str]:
        return list(self._feeds)

    def collect(self, *, feeds: Sequence[str] | None = None) -> list[CollectionReport]:
        """
        Collect the selected feeds (all by default) and store their reports.

        A ``ResolutionError`` from any feed propagates after the other feeds
        finish; reports of feeds that did complete are still stored.
        """

        selected = self._select_feeds(feeds)
        if not selected:
            raise ValueError("No configured feeds matched the run criteria.")

        with ThreadPoolExecutor(
            max_workers=len(selected),
            thread_name_prefix="feed",
        ) as executor:
            futures = {
                endpoint.name: executor.submit(self._pipeline.run, endpoint)
                for endpoint in selected
            }

        reports: list[CollectionReport] = []
        first_error: Exception | None = None
        for name, future in futures.items():
            try:
                report = future.result()
            except Exception as exc:
                logger.error("Feed collection failed feed=%s error=%s", name, exc)
                if first_error is None:
                    first_error = exc
                continue
            reports.append(report)
            self._store(report)

        if first_error is not None:
            raise first_error
        return reports

    def latest(self, feed: str | None = None) -> list[CollectionReport]:
        """
        Return the most recent report per feed, in configuration order.

        Feed names are matched case-insensitively, as in ``collect``.
        """

        if feed is not None:
            feed = feed.strip().lower()
            if feed not in self._feeds:
                raise KeyError(feed)
        with self._lock:
            return [
                self._latest[name]
                for name in self._feeds
                if name in self._latest and (feed is None or name == feed)
            ]

    def _store(self, report: CollectionReport) -> None:
        # Overlapping collections may finish out of order; keep the newest run.
        with self._lock:
            current = self._latest.get(report.feed)
            if current is None or report.started_at >= current.started_at:
                self._latest[report.feed] = report

    def _select_feeds(self, feeds: Sequence[str] | None) -> list[FeedEndpoint]:
        if not feeds:
            return list(self._feeds.values())

        normalized = {item.strip().lower() for item in feeds if item.strip()}
        unknown = normalized - set(self._feeds)
        if unknown:
            raise ValueError(f"Unknown feed(s): {sorted(unknown)}.")
        return [endpoint for name, endpoint in self._feeds.items() if name in normalized]

    def _build_pipeline(self) -> CollectionPipeline:
        token_pool = TokenPool(capacity=self._settings.token_pool_size)
        fetcher = PageFetcher(
            session=self._session,
            token_pool=token_pool,
            timeout_seconds=self._settings.timeout_seconds,
            pacing_seconds=self._settings.pacing_seconds,
            max_attempts=self._settings.max_attempts,
            backoff=backoff_from_settings(
                self._settings.backoff_seconds,
                self._settings.backoff_multiplier,
            ),
        )
        resolver = PagingResolver(
            session=self._session,
            timeout_seconds=self._settings.timeout_seconds,
        )
        return CollectionPipeline(
            resolver=resolver,
            fetcher=fetcher,
            worker_count=self._settings.worker_count,
            barrier_timeout_seconds=self._settings.barrier_timeout_seconds,
        )


@lru_cache(maxsize=1)
def get_agent_ranking_service() -> AgentRankingService:
    """
    Build and cache the agent ranking service from environment settings.
    """

    return AgentRankingService(
        feeds=build_feed_endpoints(get_funda_api_settings()),
        settings=get_collection_settings(),
    )
