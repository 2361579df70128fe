"""
agent_ranking/schemas package marker.
"""

from agent_ranking.schemas.feed import FeedObject, FeedPaging, FeedResponse
from agent_ranking.schemas.rankings import (
    DroppedPageResponse,
    FeedRankingResponse,
    RankedAgentResponse,
)

__all__ = [
    "DroppedPageResponse",
    "FeedObject",
    "FeedPaging",
    "FeedRankingResponse",
    "FeedResponse",
    "RankedAgentResponse",
]
