"""Use case for operating on any entity by ID alone.

The kind is derived from the ID prefix, so callers never name it.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict

from assistant_api.db.vector_store.client import StoreError
from assistant_api.features.entities.dtos import (
    BatchDeleteResponse,
    BatchGetResponse,
    BatchItemError,
)
from assistant_api.features.entities.errors import (
    EntityNotFoundError,
    EntityOperationError,
    MalformedEntityIdError,
    UnknownIdPrefixError,
)
from assistant_api.features.entities.ids import kind_for_id, split_id
from assistant_api.features.entities.models import Entity, identities
from assistant_api.features.entities.protocols import EntityStore
from assistant_api.features.entities.registry import PREFIX_TO_KIND, EntityKind

logger = logging.getLogger(__name__)

INVALID_ID_FORMAT = "Invalid ID format"
DELETE_FAILED = "Delete failed"
GET_FAILED = "Get failed"
NOT_FOUND = "Not found"


class EntityResolverImpl:
    """Resolves IDs to kinds and dispatches unified operations."""

    def __init__(self, store: EntityStore):
        self.store: EntityStore = store

    @staticmethod
    def valid_prefixes() -> list[str]:
        return sorted(PREFIX_TO_KIND)

    def resolve(self, entity_id: str) -> EntityKind | None:
        """Return the kind owning ``entity_id``'s prefix, or None."""
        return kind_for_id(entity_id)

    def resolve_or_raise(self, entity_id: str) -> EntityKind:
        """Like ``resolve`` but distinguishes the two failure modes.

        Raises:
            MalformedEntityIdError: If the ID has no ``prefix_token`` shape
            UnknownIdPrefixError: If the prefix belongs to no kind
        """
        if split_id(entity_id) is None:
            raise MalformedEntityIdError(entity_id)
        kind = self.resolve(entity_id)
        if kind is None:
            raise UnknownIdPrefixError(entity_id, self.valid_prefixes())
        return kind

    async def get(self, entity_id: str) -> Entity:
        """Fetch any entity by ID.

        Raises:
            EntityNotFoundError: If the kind is known but the record is absent
        """
        kind = self.resolve_or_raise(entity_id)
        try:
            entity = await self.store.get(kind, entity_id)
        except StoreError as e:
            logger.error("Error getting entity %s: %s", entity_id, e)
            raise EntityOperationError("get", "entity") from e
        if entity is None:
            raise EntityNotFoundError("Entity", entity_id)
        return entity

    async def delete(self, entity_id: str) -> EntityKind:
        """Delete any entity by ID; returns the resolved kind."""
        kind = self.resolve_or_raise(entity_id)
        try:
            await self.store.delete(kind, [entity_id])
        except StoreError as e:
            logger.error("Error deleting entity %s: %s", entity_id, e)
            raise EntityOperationError("delete", "entity") from e
        return kind

    async def delete_many(self, ids: list[str]) -> BatchDeleteResponse:
        """Delete each ID independently.

        A bad or failing ID is reported in ``errors`` and never stops the
        others from being processed.
        """
        deleted: list[str] = []
        errors: list[BatchItemError] = []

        for entity_id in ids:
            kind = self.resolve(entity_id)
            if kind is None:
                errors.append(BatchItemError(id=entity_id, error=INVALID_ID_FORMAT))
                continue
            try:
                await self.store.delete(kind, [entity_id])
            except StoreError as e:
                logger.warning("Batch delete of %s failed: %s", entity_id, e)
                errors.append(BatchItemError(id=entity_id, error=DELETE_FAILED))
                continue
            deleted.append(entity_id)

        return BatchDeleteResponse(success=not errors, deleted=deleted, errors=errors)

    async def get_many(self, ids: list[str]) -> BatchGetResponse:
        """Fetch entities of mixed kinds, one concurrent call per kind."""
        errors: list[BatchItemError] = []
        by_kind: dict[EntityKind, list[str]] = defaultdict(list)
        for entity_id in dict.fromkeys(ids):
            kind = self.resolve(entity_id)
            if kind is None:
                errors.append(BatchItemError(id=entity_id, error=INVALID_ID_FORMAT))
            else:
                by_kind[kind].append(entity_id)

        async def fetch(kind: EntityKind, kind_ids: list[str]) -> list[Entity] | None:
            try:
                return await self.store.get_many(kind, kind_ids)
            except StoreError as e:
                logger.warning("Batch get of %s failed: %s", kind, e)
                return None

        groups = list(by_kind.items())
        fetched = await asyncio.gather(*(fetch(kind, kind_ids) for kind, kind_ids in groups))

        results: list[dict[str, object]] = []
        for (_kind, kind_ids), entities in zip(groups, fetched):
            if entities is None:
                errors.extend(BatchItemError(id=i, error=GET_FAILED) for i in kind_ids)
                continue
            found = identities(entities)
            results.extend(entity.to_record() for entity in entities)
            errors.extend(
                BatchItemError(id=i, error=NOT_FOUND) for i in kind_ids if i not in found
            )

        return BatchGetResponse(results=results, errors=errors)
