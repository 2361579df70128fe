"""
Collection pipeline: resolve pages, fan out page units, wait, rank.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from agent_ranking.collection.aggregator import Aggregator
from agent_ranking.collection.barrier import CompletionBarrier
from agent_ranking.collection.errors import BarrierTimeoutError, PageError
from agent_ranking.collection.fetcher import PageFetcher
from agent_ranking.collection.paging import PagingResolver
from agent_ranking.collection.ranking import rank_agents
from agent_ranking.domain.listings import CollectionReport, FeedEndpoint
from agent_ranking.logging_utils import log_event

logger = logging.getLogger(__name__)


class CollectionPipeline:
    """
    Runs one feed end to end and reports the agent ranking.

    All mutable run state (count map, barrier, worker pool) is created inside
    ``run``, so one pipeline can be reused for consecutive runs.
    """

    def __init__(
        self,
        *,
        resolver: PagingResolver,
        fetcher: PageFetcher,
        worker_count: int = 50,
        barrier_timeout_seconds: float | None = None,
    ) -> None:
        self._resolver = resolver
        self._fetcher = fetcher
        self._worker_count = max(1, worker_count)
        self._barrier_timeout_seconds = barrier_timeout_seconds

    def run(self, endpoint: FeedEndpoint) -> CollectionReport:
        """
        Collect every page of ``endpoint``.

        ``ResolutionError`` propagates before any page is scheduled. Page-level
        failures are logged and listed in ``CollectionReport.dropped_pages``.
        On ``BarrierTimeoutError`` the units still running stop before their
        next request, so they do not hold pool slots into the next run.
        """

        started_at = datetime.now(timezone.utc)
        page_count = self._resolver.resolve(endpoint)

        aggregator = Aggregator()
        barrier = CompletionBarrier(target=page_count)
        cancel = threading.Event()

        log_event(
            logger,
            logging.INFO,
            "collection_started",
            feed=endpoint.name,
            page_count=page_count,
        )

        executor = ThreadPoolExecutor(
            max_workers=min(self._worker_count, page_count),
            thread_name_prefix=f"collect-{endpoint.name}",
        )
        try:
            for page in range(1, page_count + 1):
                executor.submit(self._run_unit, endpoint, page, aggregator, barrier, cancel)
            outcomes = barrier.wait(timeout=self._barrier_timeout_seconds)
        except BarrierTimeoutError as exc:
            cancel.set()
            log_event(
                logger,
                logging.ERROR,
                "collection_timed_out",
                feed=endpoint.name,
                pages_completed=exc.arrived,
                page_count=page_count,
            )
            raise
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        dropped = [outcome for outcome in outcomes if outcome.status == "dropped"]
        report = CollectionReport(
            feed=endpoint.name,
            page_count=page_count,
            rankings=rank_agents(aggregator.snapshot()),
            pages_aggregated=page_count - len(dropped),
            listings_aggregated=aggregator.listings_applied,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            dropped_pages=dropped,
        )
        log_event(
            logger,
            logging.INFO if report.is_complete else logging.WARNING,
            "collection_completed",
            feed=endpoint.name,
            page_count=page_count,
            pages_aggregated=report.pages_aggregated,
            pages_dropped=len(dropped),
            listings_aggregated=report.listings_aggregated,
            agents=len(report.rankings),
        )
        return report

    def _run_unit(
        self,
        endpoint: FeedEndpoint,
        page: int,
        aggregator: Aggregator,
        barrier: CompletionBarrier,
        cancel: threading.Event,
    ) -> None:
        error: str | None = None
        try:
            batch = self._fetcher.fetch(endpoint, page, cancel)
            aggregator.apply(batch)
        except PageError as exc:
            error = str(exc)
            log_event(
                logger,
                logging.WARNING,
                "page_dropped",
                feed=endpoint.name,
                page=page,
                error=error,
            )
        except Exception as exc:
            error = f"unexpected error: {exc}"
            log_event(
                logger,
                logging.ERROR,
                "page_unit_failed",
                exc_info=True,
                feed=endpoint.name,
                page=page,
                error=str(exc),
            )
        finally:
            barrier.arrive(page, error)
