"""Per-kind CRUD route factory.

``create_entity_router`` builds the same six routes for any kind from its
registry spec:

    GET    /<plural>          list/search (q, limit, field=value filters)
    GET    /<plural>/{id}     get
    POST   /<plural>          create
    PUT    /<plural>/{id}     replace
    PATCH  /<plural>/{id}     merge
    DELETE /<plural>/{id}     delete
"""

from collections.abc import Mapping
from typing import Any, Protocol

from fastapi import APIRouter, Body, Depends, Path, Request, Response, status

from assistant_api.core.params import normalize_limit
from assistant_api.db.vector_store import VectorStoreClient, get_vector_store
from assistant_api.features.entities.dtos import ListEntitiesResponse
from assistant_api.features.entities.errors import ENTITY_ERRORS
from assistant_api.features.entities.models import Entity
from assistant_api.features.entities.registry import KindSpec
from assistant_api.features.entities.routes.http_errors import to_http_exception
from assistant_api.features.entities.usecases import EntityCrudUseCaseImpl

# Query parameters that are not equality filters.
RESERVED_QUERY_PARAMS = frozenset({"q", "limit"})


class EntityCrudUseCase(Protocol):
    """Protocol for the per-kind CRUD use case."""

    async def list_entities(
        self,
        query: str | None = None,
        limit: int = 10,
        filters: Mapping[str, Any] | None = None,
    ) -> ListEntitiesResponse: ...

    async def get(self, entity_id: str) -> Entity: ...

    async def create(self, payload: Mapping[str, Any]) -> Entity: ...

    async def replace(self, entity_id: str, payload: Mapping[str, Any]) -> Entity: ...

    async def patch(self, entity_id: str, payload: Mapping[str, Any]) -> Entity: ...

    async def delete(self, entity_id: str) -> None: ...


def create_entity_router(spec: KindSpec) -> APIRouter:
    """Create the CRUD router for one entity kind."""
    kind = str(spec.kind)

    def get_use_case(
        store: VectorStoreClient = Depends(get_vector_store),
    ) -> EntityCrudUseCase:
        """Dependency injection for this kind's CRUD use case."""
        return EntityCrudUseCaseImpl(store=store, spec=spec)

    router = APIRouter(prefix=f"/{spec.plural}", tags=[spec.plural])

    @router.get("", response_model=ListEntitiesResponse)
    async def list_entities(
        request: Request,
        q: str | None = None,
        limit: str | None = None,
        use_case: EntityCrudUseCase = Depends(get_use_case),
    ) -> ListEntitiesResponse:
        """List or search entities of this kind.

        Any query parameter besides ``q`` and ``limit`` is an equality filter.
        """
        filters = {
            key: value
            for key, value in request.query_params.items()
            if key not in RESERVED_QUERY_PARAMS
        }
        try:
            return await use_case.list_entities(
                query=q, limit=normalize_limit(limit), filters=filters
            )
        except ENTITY_ERRORS as e:
            raise to_http_exception(e) from e

    @router.get("/{entity_id}", response_model=Entity)
    async def get_entity(
        entity_id: str = Path(..., description=f"The {kind}'s ID"),
        use_case: EntityCrudUseCase = Depends(get_use_case),
    ) -> Entity:
        """Get one entity of this kind by ID."""
        try:
            return await use_case.get(entity_id)
        except ENTITY_ERRORS as e:
            raise to_http_exception(e) from e

    @router.post("", response_model=Entity, status_code=status.HTTP_201_CREATED)
    async def create_entity(
        payload: dict[str, Any] = Body(...),
        use_case: EntityCrudUseCase = Depends(get_use_case),
    ) -> Entity:
        """Create an entity; an ID is generated when none is given."""
        try:
            return await use_case.create(payload)
        except ENTITY_ERRORS as e:
            raise to_http_exception(e) from e

    @router.put("/{entity_id}", response_model=Entity)
    async def replace_entity(
        entity_id: str = Path(..., description=f"The {kind}'s ID"),
        payload: dict[str, Any] = Body(...),
        use_case: EntityCrudUseCase = Depends(get_use_case),
    ) -> Entity:
        """Replace an entity; fields missing from the body are cleared."""
        try:
            return await use_case.replace(entity_id, payload)
        except ENTITY_ERRORS as e:
            raise to_http_exception(e) from e

    @router.patch("/{entity_id}", response_model=Entity)
    async def patch_entity(
        entity_id: str = Path(..., description=f"The {kind}'s ID"),
        payload: dict[str, Any] = Body(...),
        use_case: EntityCrudUseCase = Depends(get_use_case),
    ) -> Entity:
        """Merge the body into an entity; other fields are kept."""
        try:
            return await use_case.patch(entity_id, payload)
        except ENTITY_ERRORS as e:
            raise to_http_exception(e) from e

    @router.delete(
        "/{entity_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
    )
    async def delete_entity(
        entity_id: str = Path(..., description=f"The {kind}'s ID"),
        use_case: EntityCrudUseCase = Depends(get_use_case),
    ) -> Response:
        """Delete an entity. Succeeds whether or not it existed."""
        try:
            await use_case.delete(entity_id)
        except ENTITY_ERRORS as e:
            raise to_http_exception(e) from e
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
