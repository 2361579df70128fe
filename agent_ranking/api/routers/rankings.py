"""
agent_ranking/api/routers/rankings.py

Agent ranking endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agent_ranking.collection.errors import BarrierTimeoutError, CollectionError
from agent_ranking.config import get_ranking_settings
from agent_ranking.schemas.rankings import FeedRankingResponse
from agent_ranking.services.agent_ranking_service import (
    AgentRankingService,
    get_agent_ranking_service,
)

router = APIRouter(prefix="/rankings", tags=["rankings"])


def _resolve_top_k(top_k: int | None) -> int:
    return top_k if top_k is not None else get_ranking_settings().top_k


@router.get("", response_model=list[FeedRankingResponse])
def list_rankings(
    top_k: int | None = Query(default=None, ge=0, description="Agents to return per feed"),
    ranking_service: AgentRankingService = Depends(get_agent_ranking_service),
) -> list[FeedRankingResponse]:
    """
    Return the latest ranking of every feed that has been collected.
    """

    reports = ranking_service.latest()
    if not reports:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No rankings collected yet. Trigger POST /rankings/refresh first.",
        )
    limit = _resolve_top_k(top_k)
    return [FeedRankingResponse.from_report(report, top_k=limit) for report in reports]


@router.get("/{feed}", response_model=FeedRankingResponse)
def get_feed_ranking(
    feed: str,
    top_k: int | None = Query(default=None, ge=0, description="Agents to return"),
    ranking_service: AgentRankingService = Depends(get_agent_ranking_service),
) -> FeedRankingResponse:
    """
    Return the latest ranking of one feed.
    """

    try:
        reports = ranking_service.latest(feed)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown feed '{feed}'.",
        ) from exc
    if not reports:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Feed '{feed}' has not been collected yet.",
        )
    return FeedRankingResponse.from_report(reports[0], top_k=_resolve_top_k(top_k))


@router.post("/refresh", response_model=list[FeedRankingResponse])
def refresh_rankings(
    feed: str | None = Query(default=None, description="Optional feed name filter"),
    top_k: int | None = Query(default=None, ge=0, description="Agents to return per feed"),
    ranking_service: AgentRankingService = Depends(get_agent_ranking_service),
) -> list[FeedRankingResponse]:
    """
    Collect all feeds (or one selected feed) now and return the fresh rankings.
    """

    try:
        reports = ranking_service.collect(feeds=[feed] if feed else None)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except BarrierTimeoutError as exc:
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=str(exc),
        ) from exc
    except CollectionError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc

    limit = _resolve_top_k(top_k)
    return [FeedRankingResponse.from_report(report, top_k=limit) for report in reports]
