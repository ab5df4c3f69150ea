"""Entity data transfer objects."""

from .entity_dto import (
    BatchDeleteRequest,
    BatchDeleteResponse,
    BatchGetRequest,
    BatchGetResponse,
    BatchItemError,
    KindStatsDto,
    ListEntitiesResponse,
    StatsResponse,
)

__all__ = [
    "BatchDeleteRequest",
    "BatchDeleteResponse",
    "BatchGetRequest",
    "BatchGetResponse",
    "BatchItemError",
    "KindStatsDto",
    "ListEntitiesResponse",
    "StatsResponse",
]
