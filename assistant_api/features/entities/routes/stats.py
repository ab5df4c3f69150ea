"""Stats route handler."""

from typing import Protocol

from fastapi import APIRouter, Depends

from assistant_api.db.vector_store import VectorStoreClient, get_vector_store
from assistant_api.features.entities.dtos import StatsResponse
from assistant_api.features.entities.usecases import GetStatsUseCaseImpl


class GetStatsUseCase(Protocol):
    """Protocol for the get stats use case."""

    async def execute(self) -> StatsResponse:
        """Collect document counts for every kind."""
        ...


def get_stats_use_case(
    store: VectorStoreClient = Depends(get_vector_store),
) -> GetStatsUseCase:
    """Dependency injection for the get stats use case."""
    return GetStatsUseCaseImpl(store=store)


router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    use_case: GetStatsUseCase = Depends(get_stats_use_case),
) -> StatsResponse:
    """Document counts per entity kind."""
    return await use_case.execute()
