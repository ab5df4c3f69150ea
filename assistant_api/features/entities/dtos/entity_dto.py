"""Entity DTOs for API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field


class ListEntitiesResponse(BaseModel):
    """Response for listing/searching one kind."""

    results: list[dict[str, Any]] = Field(
        default_factory=list, description="Matching entities in store rank order"
    )
    total: int = Field(default=0, description="Total matches reported by the store")


class BatchDeleteRequest(BaseModel):
    """Request to delete one or more entities of any kind."""

    id: str | None = Field(default=None, description="A single entity ID")
    ids: list[str] | None = Field(default=None, description="Several entity IDs")

    def all_ids(self) -> list[str]:
        """The IDs to process; ``ids`` wins over ``id``."""
        if self.ids:
            return list(self.ids)
        return [self.id] if self.id else []


class BatchItemError(BaseModel):
    """Why one ID in a batch could not be processed."""

    id: str
    error: str


class BatchDeleteResponse(BaseModel):
    """Partition of a batch delete into successes and failures."""

    success: bool = Field(..., description="True only when no ID failed")
    deleted: list[str] = Field(default_factory=list)
    errors: list[BatchItemError] = Field(default_factory=list)


class BatchGetRequest(BaseModel):
    """Request to fetch several entities of any kind."""

    ids: list[str] = Field(..., min_length=1, description="Entity IDs to fetch")


class BatchGetResponse(BaseModel):
    """Entities found by a batch get, plus the IDs that failed."""

    results: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[BatchItemError] = Field(default_factory=list)


class KindStatsDto(BaseModel):
    """Document count for one kind."""

    total: int = 0
    has_data: bool = False


class StatsResponse(BaseModel):
    """Document counts across every entity kind."""

    total: int = Field(..., description="Sum over all kinds")
    kinds: dict[str, KindStatsDto] = Field(default_factory=dict)
    failed_types: list[str] = Field(
        default_factory=list, description="Kinds whose stats could not be read"
    )
