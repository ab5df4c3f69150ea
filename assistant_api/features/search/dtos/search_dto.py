"""Unified search DTOs."""

import json
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

SearchType = Literal["hybrid", "openai_dense", "bge_m3_dense", "bge_m3_sparse"]


class SearchRequest(BaseModel):
    """Request body of the unified search.

    Accepts the loose shapes webhook callers tend to send: ``types`` as a
    list or comma-separated string, ``filters`` as an object or a JSON
    string, ``limit`` as a number or numeric string.
    """

    query: str | None = Field(default=None, description="Search text")
    types: list[str] | str | None = Field(
        default=None, description="Kinds to search; all kinds when omitted"
    )
    filters: dict[str, Any] | None = Field(
        default=None, description="Equality filters applied in every kind"
    )
    limit: int | str | None = Field(default=10, description="Maximum results")
    search_type: SearchType | None = Field(
        default=None, description="Ranking mode of the store"
    )

    @field_validator("filters", mode="before")
    @classmethod
    def parse_filters(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if not value.strip():
            return None
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError("filters must be a JSON object") from e
        if not isinstance(parsed, dict):
            raise ValueError("filters must be a JSON object")
        return parsed


class SearchResponse(BaseModel):
    """Merged, ranked result of a unified search."""

    query: str
    types: list[str] = Field(..., description="Kinds that were actually searched")
    total: int = Field(..., description="Merged result count before truncation")
    results: list[dict[str, Any]] = Field(default_factory=list)
    failed_types: list[str] = Field(
        default_factory=list,
        description="Kinds whose query failed or timed out and contributed nothing",
    )
