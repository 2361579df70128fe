"""
agent_ranking/domain/listings.py

Domain models for listing collection and agent ranking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

PageStatus = Literal["aggregated", "dropped"]


@dataclass(frozen=True)
class Listing:
    """
    One listing for sale, reduced to the fields the ranking needs.
    """

    agent_name: str
    is_sold: bool = False


PageBatch = tuple[Listing, ...]


@dataclass(frozen=True)
class RankedEntry:
    agent_name: str
    count: int


@dataclass(frozen=True)
class PageOutcome:
    """
    Final state of one scheduled page.
    """

    page: int
    status: PageStatus
    error: str | None = None


@dataclass(frozen=True)
class FeedEndpoint:
    """
    One paginated listing query against the upstream feed.
    """

    name: str
    base_url: str
    search_type: str
    location_path: str

    def params_for(self, page: int) -> dict[str, str | int]:
        return {"type": self.search_type, "zo": self.location_path, "page": page}

    def describe(self, page: int) -> str:
        return f"{self.base_url}?type={self.search_type}&zo={self.location_path}&page={page}"


@dataclass(frozen=True)
class CollectionReport:
    """
    Outcome of one collection run over a feed.
    """

    feed: str
    page_count: int
    rankings: list[RankedEntry]
    pages_aggregated: int
    listings_aggregated: int
    started_at: datetime
    finished_at: datetime
    dropped_pages: list[PageOutcome] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.dropped_pages
