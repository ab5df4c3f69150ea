"""Generic CRUD use case, instantiated once per entity kind.

Every kind gets the same list/get/create/replace/patch/delete semantics;
kinds differ only by their registry spec (prefix and optional validator).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from assistant_api.db.vector_store.client import StoreError
from assistant_api.features.entities.dtos import ListEntitiesResponse
from assistant_api.features.entities.errors import (
    EntityNotFoundError,
    EntityOperationError,
    InvalidEntityError,
)
from assistant_api.features.entities.ids import generate_id, has_kind_prefix
from assistant_api.features.entities.models import SERVER_FIELDS, Entity, has_title
from assistant_api.features.entities.protocols import EntityStore
from assistant_api.features.entities.registry import KindSpec, prefix_for_kind

logger = logging.getLogger(__name__)

# Fields a request body can never overwrite on update.
_PROTECTED_FIELDS = SERVER_FIELDS | {"id"}


class EntityCrudUseCaseImpl:
    """Implementation of the per-kind CRUD use case."""

    def __init__(self, store: EntityStore, spec: KindSpec):
        """Initialize the use case with dependencies.

        Args:
            store: Store used for every read and write
            spec: Registry entry of the kind this instance serves
        """
        self.store: EntityStore = store
        self.spec: KindSpec = spec

    @property
    def kind(self) -> str:
        return str(self.spec.kind)

    def _to_entity(self, record: Mapping[str, Any]) -> Entity:
        try:
            return Entity.model_validate(record)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise InvalidEntityError(f"{location}: {first['msg']}") from e

    def _validate(self, entity: Entity) -> None:
        if not has_title(entity):
            raise InvalidEntityError("title is required")
        if self.spec.validator is not None:
            error = self.spec.validator(entity.to_record())
            if error:
                raise InvalidEntityError(error)

    def _owns(self, entity_id: str) -> bool:
        return has_kind_prefix(entity_id, self.spec.kind)

    def _failed(self, verb: str, error: StoreError) -> EntityOperationError:
        logger.error("Error trying to %s %s: %s", verb, self.kind, error)
        return EntityOperationError(verb, self.kind)

    async def _get_existing(self, entity_id: str, verb: str) -> Entity:
        if not self._owns(entity_id):
            raise EntityNotFoundError(self.kind, entity_id)
        try:
            existing = await self.store.get(self.spec.kind, entity_id)
        except StoreError as e:
            raise self._failed(verb, e) from e
        if existing is None:
            raise EntityNotFoundError(self.kind, entity_id)
        return existing

    async def _persist(self, entity: Entity, verb: str) -> Entity:
        try:
            return await self.store.upsert(self.spec.kind, entity)
        except StoreError as e:
            raise self._failed(verb, e) from e

    async def list_entities(
        self,
        query: str | None = None,
        limit: int = 10,
        filters: Mapping[str, Any] | None = None,
    ) -> ListEntitiesResponse:
        """Search this kind, optionally narrowed by equality filters.

        Empty-string and None filter values are dropped.
        """
        clean_filters = {
            key: value
            for key, value in (filters or {}).items()
            if value is not None and value != ""
        }
        try:
            page = await self.store.search(
                self.spec.kind,
                query=query,
                filters=clean_filters or None,
                limit=limit,
            )
        except StoreError as e:
            raise self._failed("list", e) from e
        return ListEntitiesResponse(results=page.results, total=page.total)

    async def get(self, entity_id: str) -> Entity:
        """Fetch one entity of this kind.

        Raises:
            EntityNotFoundError: If the store has no such record, or the ID
                belongs to another kind
        """
        return await self._get_existing(entity_id, "get")

    async def create(self, payload: Mapping[str, Any]) -> Entity:
        """Validate and persist a new entity.

        An ID is generated when the payload carries none; a supplied ID must
        use this kind's prefix. Timestamps are always assigned by the store
        client.

        Raises:
            InvalidEntityError: If title, the kind's required fields or the
                supplied ID are invalid
        """
        record = {k: v for k, v in payload.items() if k not in _PROTECTED_FIELDS}
        record["id"] = payload.get("id") or generate_id(self.spec.kind)
        entity = self._to_entity(record)
        self._validate(entity)

        if not self._owns(entity.id):
            raise InvalidEntityError(
                f"id must start with '{prefix_for_kind(self.spec.kind)}_'"
            )
        return await self._persist(entity, "create")

    async def replace(self, entity_id: str, payload: Mapping[str, Any]) -> Entity:
        """Replace an existing entity with ``payload``.

        Fields absent from the payload are dropped. ``id`` comes from the
        path and ``created_at`` from the stored record, whatever the body says.

        Raises:
            EntityNotFoundError: If the entity does not exist
            InvalidEntityError: If the replacement fails create validation
        """
        existing = await self._get_existing(entity_id, "update")

        record = {k: v for k, v in payload.items() if k not in _PROTECTED_FIELDS}
        record["id"] = entity_id
        record["created_at"] = existing.created_at
        entity = self._to_entity(record)
        self._validate(entity)
        return await self._persist(entity, "update")

    async def patch(self, entity_id: str, payload: Mapping[str, Any]) -> Entity:
        """Overlay ``payload`` onto an existing entity.

        Fields absent from the payload keep their stored values. The merged
        record must still pass create validation.

        Raises:
            EntityNotFoundError: If the entity does not exist
            InvalidEntityError: If the merged record is invalid
        """
        existing = await self._get_existing(entity_id, "update")

        record = existing.to_record()
        record.update(
            {k: v for k, v in payload.items() if k not in _PROTECTED_FIELDS}
        )
        record["id"] = entity_id
        record["created_at"] = existing.created_at
        entity = self._to_entity(record)
        self._validate(entity)
        return await self._persist(entity, "update")

    async def delete(self, entity_id: str) -> None:
        """Delete by ID; deleting an absent entity is not an error.

        Raises:
            EntityNotFoundError: If the ID belongs to another kind
        """
        if not self._owns(entity_id):
            raise EntityNotFoundError(self.kind, entity_id)
        try:
            await self.store.delete(self.spec.kind, [entity_id])
        except StoreError as e:
            raise self._failed("delete", e) from e
