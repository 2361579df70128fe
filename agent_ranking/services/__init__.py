"""
agent_ranking/services package marker.
"""

from agent_ranking.services.agent_ranking_service import (
    GARDEN_FEED,
    REGULAR_FEED,
    AgentRankingService,
    build_feed_endpoints,
    get_agent_ranking_service,
)

__all__ = [
    "AgentRankingService",
    "GARDEN_FEED",
    "REGULAR_FEED",
    "build_feed_endpoints",
    "get_agent_ranking_service",
]
