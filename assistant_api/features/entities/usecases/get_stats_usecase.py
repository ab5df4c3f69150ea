"""Use case for reporting document counts across every entity kind."""

import asyncio
import logging

from assistant_api.db.vector_store.client import IndexStats, StoreError
from assistant_api.features.entities.dtos import KindStatsDto, StatsResponse
from assistant_api.features.entities.protocols import EntityStore
from assistant_api.features.entities.registry import ENTITY_KINDS, EntityKind

logger = logging.getLogger(__name__)


class GetStatsUseCaseImpl:
    """Implementation of the get stats use case."""

    def __init__(self, store: EntityStore):
        self.store: EntityStore = store

    async def _stats_for(self, kind: EntityKind) -> IndexStats | None:
        try:
            return await self.store.get_stats(kind)
        except StoreError as e:
            logger.warning("Stats for %s unavailable: %s", kind, e)
            return None

    async def execute(self) -> StatsResponse:
        """Collect stats for all kinds concurrently.

        A kind whose stats cannot be read counts as empty and is listed in
        ``failed_types``.
        """
        stats = await asyncio.gather(*(self._stats_for(kind) for kind in ENTITY_KINDS))

        kinds: dict[str, KindStatsDto] = {}
        failed: list[str] = []
        for kind, kind_stats in zip(ENTITY_KINDS, stats):
            if kind_stats is None:
                failed.append(str(kind))
                kind_stats = IndexStats()
            kinds[str(kind)] = KindStatsDto(
                total=kind_stats.total, has_data=kind_stats.has_data
            )

        return StatsResponse(
            total=sum(s.total for s in kinds.values()),
            kinds=kinds,
            failed_types=failed,
        )
