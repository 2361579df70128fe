"""
Concurrent fetch-aggregate pipeline for paginated listing feeds.
"""

from agent_ranking.collection.aggregator import Aggregator
from agent_ranking.collection.backoff import (
    BackoffPolicy,
    backoff_from_settings,
    exponential_backoff,
    fixed_backoff,
)
from agent_ranking.collection.barrier import CompletionBarrier
from agent_ranking.collection.errors import (
    BarrierError,
    BarrierTimeoutError,
    CollectionError,
    DecodeError,
    FetchCancelledError,
    PageError,
    ResolutionError,
    RetriesExhaustedError,
    TransportError,
)
from agent_ranking.collection.fetcher import PageFetcher
from agent_ranking.collection.paging import PagingResolver
from agent_ranking.collection.pipeline import CollectionPipeline
from agent_ranking.collection.ranking import rank_agents, top_agents
from agent_ranking.collection.token_pool import TokenPool

__all__ = [
    "Aggregator",
    "BackoffPolicy",
    "BarrierError",
    "BarrierTimeoutError",
    "CollectionError",
    "CollectionPipeline",
    "CompletionBarrier",
    "DecodeError",
    "FetchCancelledError",
    "PageError",
    "PageFetcher",
    "PagingResolver",
    "ResolutionError",
    "RetriesExhaustedError",
    "TokenPool",
    "TransportError",
    "backoff_from_settings",
    "exponential_backoff",
    "fixed_backoff",
    "rank_agents",
    "top_agents",
]
