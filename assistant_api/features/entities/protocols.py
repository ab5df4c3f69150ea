"""Protocol definition for the entity store used by the use cases."""

from typing import Any, Protocol

from assistant_api.db.vector_store.client import IndexStats, SearchPage
from assistant_api.features.entities.models import Entity
from assistant_api.features.entities.registry import EntityKind


class EntityStore(Protocol):
    """Operations the use cases need from the vector store.

    ``VectorStoreClient`` is the production implementation.
    """

    async def upsert(self, kind: EntityKind, entity: Entity) -> Entity:
        """Create or replace an entity; returns it as persisted."""
        ...

    async def get(self, kind: EntityKind, entity_id: str) -> Entity | None:
        """Fetch one entity, or None when absent."""
        ...

    async def get_many(self, kind: EntityKind, ids: list[str]) -> list[Entity]:
        """Fetch several entities of one kind."""
        ...

    async def delete(self, kind: EntityKind, ids: list[str]) -> None:
        """Delete entities; absent IDs are not an error."""
        ...

    async def search(
        self,
        kind: EntityKind,
        query: str | None = None,
        filters: dict[str, Any] | None = None,
        limit: int = 10,
        search_type: str = "hybrid",
    ) -> SearchPage:
        """Run one ranked query scoped to a kind."""
        ...

    async def get_stats(self, kind: EntityKind) -> IndexStats:
        """Return document counts for a kind."""
        ...
