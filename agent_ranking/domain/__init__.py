"""
agent_ranking/domain package marker.
"""

from agent_ranking.domain.listings import (
    CollectionReport,
    FeedEndpoint,
    Listing,
    PageBatch,
    PageOutcome,
    RankedEntry,
)

__all__ = [
    "CollectionReport",
    "FeedEndpoint",
    "Listing",
    "PageBatch",
    "PageOutcome",
    "RankedEntry",
]
