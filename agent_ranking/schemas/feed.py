"""
agent_ranking/schemas/feed.py

Wire models for the upstream listing feed response body.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from agent_ranking.domain.listings import Listing, PageBatch


class FeedObject(BaseModel):
    """
    One listing entry in the ``Objects`` array.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    agent_name: str = Field(alias="MakelaarNaam")
    is_sold: bool = Field(default=False, alias="IsVerkocht")

    def to_listing(self) -> Listing:
        return Listing(agent_name=self.agent_name, is_sold=self.is_sold)


class FeedPaging(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    page_count: int | None = Field(default=None, alias="AantalPaginas")


class FeedResponse(BaseModel):
    """
    Top-level response envelope. Only the first page is guaranteed to carry paging.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    account_status: int | None = Field(default=None, alias="AccountStatus")
    email_not_confirmed: bool = Field(default=False, alias="EmailNotConfirmed")
    validation_failed: bool = Field(default=False, alias="ValidationFailed")
    objects: list[FeedObject] = Field(alias="Objects")
    paging: FeedPaging | None = Field(default=None, alias="Paging")

    def to_batch(self) -> PageBatch:
        return tuple(item.to_listing() for item in self.objects)
