"""Unified search route handlers."""

from typing import Any, Protocol

from fastapi import APIRouter, Depends, HTTPException, status

from assistant_api.core.params import normalize_limit
from assistant_api.core.settings import Settings, get_settings
from assistant_api.db.vector_store import VectorStoreClient, get_vector_store
from assistant_api.features.search.dtos import SearchRequest, SearchResponse
from assistant_api.features.search.errors import MissingQueryError, SearchFailedError
from assistant_api.features.search.usecases import SearchEntitiesUseCaseImpl


class SearchEntitiesUseCase(Protocol):
    """Protocol for the unified search use case."""

    async def execute(
        self,
        query: str | None,
        types: list[str] | str | None = None,
        filters: dict[str, Any] | None = None,
        limit: int = 10,
        search_type: str | None = None,
    ) -> SearchResponse:
        """Search across kinds and return one ranked list."""
        ...


def get_search_use_case(
    store: VectorStoreClient = Depends(get_vector_store),
    settings: Settings = Depends(get_settings),
) -> SearchEntitiesUseCase:
    """Dependency injection for the unified search use case."""
    return SearchEntitiesUseCaseImpl(
        store=store,
        default_search_type=settings.default_search_type,
        timeout=settings.search_timeout,
    )


async def _run_search(
    use_case: SearchEntitiesUseCase,
    query: str | None,
    types: list[str] | str | None,
    filters: dict[str, Any] | None,
    limit: int,
    search_type: str | None,
) -> SearchResponse:
    try:
        return await use_case.execute(
            query=query,
            types=types,
            filters=filters,
            limit=limit,
            search_type=search_type,
        )
    except MissingQueryError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
        ) from e
    except SearchFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        ) from e


router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    use_case: SearchEntitiesUseCase = Depends(get_search_use_case),
) -> SearchResponse:
    """Search all kinds, or the kinds listed in ``types``, in one call.

    Results from every kind are ranked together by relevance score, falling
    back to recency, and truncated to ``limit`` after merging.
    """
    return await _run_search(
        use_case,
        query=request.query,
        types=request.types,
        filters=request.filters,
        limit=normalize_limit(request.limit),
        search_type=request.search_type,
    )


@router.get("", response_model=SearchResponse)
async def search_simple(
    q: str | None = None,
    types: str | None = None,
    limit: str | None = None,
    use_case: SearchEntitiesUseCase = Depends(get_search_use_case),
) -> SearchResponse:
    """Query-string form of the unified search, without filters."""
    if not q or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="q (query) parameter is required",
        )
    return await _run_search(
        use_case,
        query=q,
        types=types,
        filters=None,
        limit=normalize_limit(limit),
        search_type=None,
    )
