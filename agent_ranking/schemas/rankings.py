"""
agent_ranking/schemas/rankings.py

Response schemas for agent ranking endpoints.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from agent_ranking.collection.ranking import top_agents
from agent_ranking.domain.listings import CollectionReport


class RankedAgentResponse(BaseModel):
    agent_name: str
    count: int = Field(..., ge=0)


class DroppedPageResponse(BaseModel):
    page: int = Field(..., ge=1)
    error: str | None = None


class FeedRankingResponse(BaseModel):
    """
    API response model for the latest ranking of one feed.
    """

    feed: str
    page_count: int = Field(..., ge=1)
    pages_aggregated: int = Field(..., ge=0)
    listings_aggregated: int = Field(..., ge=0)
    complete: bool
    started_at: datetime
    finished_at: datetime
    agents: list[RankedAgentResponse] = Field(default_factory=list)
    dropped_pages: list[DroppedPageResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: CollectionReport, *, top_k: int) -> "FeedRankingResponse":
        return cls(
            feed=report.feed,
            page_count=report.page_count,
            pages_aggregated=report.pages_aggregated,
            listings_aggregated=report.listings_aggregated,
            complete=report.is_complete,
            started_at=report.started_at,
            finished_at=report.finished_at,
            agents=[
                RankedAgentResponse(agent_name=entry.agent_name, count=entry.count)
                for entry in top_agents(report.rankings, top_k)
            ],
            dropped_pages=[
                DroppedPageResponse(page=outcome.page, error=outcome.error)
                for outcome in report.dropped_pages
            ],
        )
