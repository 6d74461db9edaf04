"""Pydantic schemas for backlog items, drafts, catalog search results and selection modes."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 5_000
COVER_URL_MAX_LENGTH = 2_048


class ItemStatus(str, Enum):
    """Lifecycle of a backlog item. Only selection moves SUGGESTED -> ACTIVE automatically."""

    SUGGESTED = "suggested"
    ACTIVE = "active"
    FINISHED = "finished"
    DEFERRED = "deferred"


class SelectionMode(str, Enum):
    MAJORITY = "majority"
    WEIGHTED_LOTTERY = "weighted_lottery"


class CatalogSearchResult(BaseModel):
    """One candidate returned by the external catalog search."""

    external_ref: int = Field(..., description="Catalog id")
    title: str
    description: str | None = None
    cover_url: str | None = None
    release_date: datetime | None = None
    secondary_ref: int | None = Field(default=None, description="Storefront id, when known")


class ItemDraft(BaseModel):
    """Client-supplied item fields for add and update."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=TITLE_MAX_LENGTH,
        description="Item title (max 100 characters).",
    )
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    cover_url: str | None = Field(default=None, max_length=COVER_URL_MAX_LENGTH)
    status: ItemStatus = ItemStatus.SUGGESTED
    external_ref: int | None = None
    secondary_ref: int | None = None
    release_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter a title.")
        return v.strip()

    @classmethod
    def from_search_result(cls, result: CatalogSearchResult) -> "ItemDraft":
        """Build a suggestion draft from a catalog search hit."""
        return cls(
            title=result.title[:TITLE_MAX_LENGTH],
            description=result.description,
            cover_url=result.cover_url,
            status=ItemStatus.SUGGESTED,
            external_ref=result.external_ref,
            secondary_ref=result.secondary_ref,
            release_date=result.release_date,
        )


class ItemView(BaseModel):
    """Public item view, annotated with whether the requester has voted for it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    cover_url: str | None = None
    vote_count: int = 0
    status: ItemStatus
    external_ref: int | None = None
    secondary_ref: int | None = None
    release_date: datetime | None = None
    added_by_username: str = "Unknown"
    voted_by_requester: bool = False
