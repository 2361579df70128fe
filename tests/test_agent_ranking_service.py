from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from agent_ranking.collection.errors import ResolutionError
from agent_ranking.config import CollectionSettings, FundaAPISettings
from agent_ranking.domain.listings import CollectionReport, FeedEndpoint, RankedEntry
from agent_ranking.services.agent_ranking_service import (
    GARDEN_FEED,
    REGULAR_FEED,
    AgentRankingService,
    build_feed_endpoints,
)
from tests._fakes import FakeResponse, FakeSession, listing_page

API_SETTINGS = FundaAPISettings(
    base_url="http://feed.test/json/",
    api_key="secret",
    location_path="/amsterdam/",
    garden_location_path="/amsterdam/tuin/",
)

FAST_SETTINGS = CollectionSettings(
    token_pool_size=4,
    worker_count=4,
    pacing_seconds=0.0,
    backoff_seconds=0.0,
    max_attempts=2,
    timeout_seconds=5.0,
    barrier_timeout_seconds=10.0,
)


def _service(session: FakeSession) -> AgentRankingService:
    return AgentRankingService(
        feeds=build_feed_endpoints(API_SETTINGS),
        settings=FAST_SETTINGS,
        session=session,  # type: ignore[arg-type]
    )


def _two_feed_session() -> FakeSession:
    return FakeSession(
        {
            ("/amsterdam/", 1): [listing_page("A", "A", "B", page_count=2)],
            ("/amsterdam/", 2): [listing_page("B", "C")],
            ("/amsterdam/tuin/", 1): [listing_page("C", page_count=1)],
        }
    )


def test_feed_endpoints_embed_api_key_and_locations() -> None:
    feeds = build_feed_endpoints(API_SETTINGS)

    assert list(feeds) == [REGULAR_FEED, GARDEN_FEED]
    assert feeds[REGULAR_FEED].base_url == "http://feed.test/json/secret/"
    assert feeds[GARDEN_FEED].params_for(3) == {"type": "koop", "zo": "/amsterdam/tuin/", "page": 3}


def test_feed_endpoints_require_api_key() -> None:
    with pytest.raises(RuntimeError, match="FUNDA_API_KEY"):
        build_feed_endpoints(FundaAPISettings(api_key=None))


def test_collect_runs_every_feed_and_stores_latest() -> None:
    service = _service(_two_feed_session())

    reports = service.collect()

    by_feed = {report.feed: report for report in reports}
    assert by_feed[REGULAR_FEED].rankings == [
        RankedEntry("A", 2),
        RankedEntry("B", 2),
        RankedEntry("C", 1),
    ]
    assert by_feed[GARDEN_FEED].rankings == [RankedEntry("C", 1)]
    assert [report.feed for report in service.latest()] == [REGULAR_FEED, GARDEN_FEED]


def test_collect_selected_feed_only() -> None:
    session = _two_feed_session()
    service = _service(session)

    reports = service.collect(feeds=["Garden"])

    assert [report.feed for report in reports] == [GARDEN_FEED]
    assert all(location == "/amsterdam/tuin/" for location, _ in session.calls)
    assert service.latest(REGULAR_FEED) == []


def test_collect_rejects_unknown_feed() -> None:
    with pytest.raises(ValueError, match="Unknown feed"):
        _service(_two_feed_session()).collect(feeds=["rental"])


def test_latest_rejects_unknown_feed() -> None:
    with pytest.raises(KeyError):
        _service(_two_feed_session()).latest("rental")


def test_resolution_error_propagates_but_keeps_other_feed() -> None:
    session = FakeSession(
        {
            ("/amsterdam/", 1): [listing_page("A", page_count=1)],
            ("/amsterdam/tuin/", 1): [FakeResponse(503)],
        }
    )
    service = _service(session)

    with pytest.raises(ResolutionError):
        service.collect()

    assert [report.feed for report in service.latest()] == [REGULAR_FEED]


def test_latest_matches_feed_name_case_insensitively() -> None:
    service = _service(_two_feed_session())
    service.collect(feeds=["Garden"])

    assert [report.feed for report in service.latest(" Garden ")] == [GARDEN_FEED]


class _ScriptedPipeline:
    """Returns queued reports in order instead of collecting."""

    def __init__(self, reports: list[CollectionReport]) -> None:
        self._reports = list(reports)

    def run(self, endpoint: FeedEndpoint) -> CollectionReport:
        return self._reports.pop(0)


def _report(started_at: datetime, agent: str) -> CollectionReport:
    return CollectionReport(
        feed=REGULAR_FEED,
        page_count=1,
        rankings=[RankedEntry(agent, 1)],
        pages_aggregated=1,
        listings_aggregated=1,
        started_at=started_at,
        finished_at=started_at + timedelta(seconds=1),
    )


def test_older_run_finishing_late_does_not_replace_newer_report() -> None:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    newer = _report(now, "new")
    older = _report(now - timedelta(minutes=5), "old")
    service = AgentRankingService(
        feeds=build_feed_endpoints(API_SETTINGS),
        settings=FAST_SETTINGS,
        session=FakeSession(),  # type: ignore[arg-type]
        pipeline=_ScriptedPipeline([newer, older]),  # type: ignore[arg-type]
    )

    service.collect(feeds=[REGULAR_FEED])
    returned = service.collect(feeds=[REGULAR_FEED])

    assert returned == [older]
    assert service.latest(REGULAR_FEED) == [newer]
