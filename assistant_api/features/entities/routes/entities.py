"""Unified entity route handlers.

These routes take any entity ID and derive the kind from its prefix.
"""

from typing import Protocol

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from assistant_api.db.vector_store import VectorStoreClient, get_vector_store
from assistant_api.features.entities.dtos import (
    BatchDeleteRequest,
    BatchDeleteResponse,
    BatchGetRequest,
    BatchGetResponse,
)
from assistant_api.features.entities.errors import ENTITY_ERRORS
from assistant_api.features.entities.models import Entity
from assistant_api.features.entities.registry import EntityKind
from assistant_api.features.entities.routes.http_errors import to_http_exception
from assistant_api.features.entities.usecases import EntityResolverImpl


class EntityResolver(Protocol):
    """Protocol for the ID-prefix resolver."""

    async def get(self, entity_id: str) -> Entity:
        """Fetch any entity by ID."""
        ...

    async def delete(self, entity_id: str) -> EntityKind:
        """Delete any entity by ID."""
        ...

    async def delete_many(self, ids: list[str]) -> BatchDeleteResponse:
        """Delete several entities, reporting per-ID failures."""
        ...

    async def get_many(self, ids: list[str]) -> BatchGetResponse:
        """Fetch several entities, reporting per-ID failures."""
        ...


def get_entity_resolver(
    store: VectorStoreClient = Depends(get_vector_store),
) -> EntityResolver:
    """Dependency injection for the entity resolver."""
    return EntityResolverImpl(store=store)


router = APIRouter(prefix="/entities", tags=["entities"])


@router.post("/delete", response_model=BatchDeleteResponse)
async def delete_entities(
    request: BatchDeleteRequest,
    resolver: EntityResolver = Depends(get_entity_resolver),
) -> BatchDeleteResponse:
    """Delete one (``id``) or several (``ids``) entities of any kind.

    Always answers 200 once the batch has been processed; ``success`` is
    false when at least one ID landed in ``errors``.
    """
    ids = request.all_ids()
    if not ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="id or ids is required"
        )
    return await resolver.delete_many(ids)


@router.post("/get", response_model=BatchGetResponse)
async def get_entities(
    request: BatchGetRequest,
    resolver: EntityResolver = Depends(get_entity_resolver),
) -> BatchGetResponse:
    """Fetch several entities of any kind in one call."""
    return await resolver.get_many(request.ids)


@router.get("/{entity_id}", response_model=Entity)
async def get_entity(
    entity_id: str = Path(..., description="Any entity ID, e.g. tsk_abc123"),
    resolver: EntityResolver = Depends(get_entity_resolver),
) -> Entity:
    """Get an entity of any kind by ID."""
    try:
        return await resolver.get(entity_id)
    except ENTITY_ERRORS as e:
        raise to_http_exception(e) from e


@router.delete(
    "/{entity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_entity(
    entity_id: str = Path(..., description="Any entity ID, e.g. tsk_abc123"),
    resolver: EntityResolver = Depends(get_entity_resolver),
) -> Response:
    """Delete an entity of any kind by ID."""
    try:
        _ = await resolver.delete(entity_id)
    except ENTITY_ERRORS as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
