"""Use case for searching across entity kinds.

The query is fanned out to every requested kind concurrently, one store
call per kind; the per-kind hits are merged, ranked as one sequence and only
then truncated to the limit.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from assistant_api.db.vector_store.client import SearchPage, StoreError
from assistant_api.features.entities.protocols import EntityStore
from assistant_api.features.entities.registry import (
    SEARCHABLE_KINDS,
    EntityKind,
    parse_kind,
)
from assistant_api.features.search.dtos import SearchResponse
from assistant_api.features.search.errors import MissingQueryError, SearchFailedError

logger = logging.getLogger(__name__)

SCORE_FIELDS = ("_score", "score")


def parse_kinds(types: Sequence[str] | str | None) -> list[EntityKind]:
    """Normalize requested kinds, silently dropping unknown tokens.

    Returns an empty list when nothing valid was requested.
    """
    if types is None:
        return []
    tokens = types.split(",") if isinstance(types, str) else list(types)

    kinds: list[EntityKind] = []
    for token in tokens:
        if not isinstance(token, str):
            continue
        kind = parse_kind(token)
        if kind is not None and kind not in kinds:
            kinds.append(kind)
    return kinds


def relevance_score(item: dict[str, Any]) -> float | None:
    """The store's relevance score of a hit, if it carries one."""
    for field in SCORE_FIELDS:
        value = item.get(field)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    return None


def updated_timestamp(item: dict[str, Any]) -> float:
    """``updated_at`` as epoch seconds; missing or unparseable is oldest."""
    value = item.get("updated_at")
    if not isinstance(value, str) or not value:
        return float("-inf")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return float("-inf")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def rank_results(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Order hits from independent per-kind queries as one sequence.

    Scored hits come first by score descending, then unscored hits; within
    each group ties fall back to ``updated_at`` descending.
    """

    def sort_key(item: dict[str, Any]) -> tuple[bool, float, float]:
        score = relevance_score(item)
        return (score is not None, score or 0.0, updated_timestamp(item))

    return sorted(items, key=sort_key, reverse=True)


class SearchEntitiesUseCaseImpl:
    """Implementation of the unified search use case."""

    def __init__(
        self,
        store: EntityStore,
        default_search_type: str = "hybrid",
        timeout: float | None = None,
    ):
        """Initialize the use case with dependencies.

        Args:
            store: Store queried once per kind
            default_search_type: Ranking mode when the caller sends none
            timeout: Per-kind time budget in seconds; None waits indefinitely
        """
        self.store: EntityStore = store
        self.default_search_type: str = default_search_type
        self.timeout: float | None = timeout

    async def _search_kind(
        self,
        kind: EntityKind,
        query: str,
        filters: dict[str, Any] | None,
        limit: int,
        search_type: str,
    ) -> SearchPage | None:
        try:
            return await asyncio.wait_for(
                self.store.search(
                    kind,
                    query=query,
                    filters=filters,
                    limit=limit,
                    search_type=search_type,
                ),
                timeout=self.timeout,
            )
        except TimeoutError:
            logger.warning("Search in %s timed out after %ss", kind, self.timeout)
        except StoreError as e:
            logger.warning("Search in %s failed: %s", kind, e)
        return None

    async def execute(
        self,
        query: str | None,
        types: Sequence[str] | str | None = None,
        filters: dict[str, Any] | None = None,
        limit: int = 10,
        search_type: str | None = None,
    ) -> SearchResponse:
        """Search the requested kinds, or every kind when none are valid.

        A kind whose query fails contributes nothing and is reported in
        ``failed_types``.

        Raises:
            MissingQueryError: If ``query`` is empty
            SearchFailedError: If every searched kind failed
        """
        if not query or not query.strip():
            raise MissingQueryError()

        kinds = parse_kinds(types) or list(SEARCHABLE_KINDS)
        pages = await asyncio.gather(
            *(
                self._search_kind(
                    kind,
                    query,
                    filters or None,
                    limit,
                    search_type or self.default_search_type,
                )
                for kind in kinds
            )
        )

        merged: list[dict[str, Any]] = []
        failed: list[str] = []
        for kind, page in zip(kinds, pages):
            if page is None:
                failed.append(str(kind))
                continue
            for hit in page.results:
                if isinstance(hit, dict):
                    merged.append({**hit, "entity_type": hit.get("entity_type") or str(kind)})

        if failed and len(failed) == len(kinds):
            raise SearchFailedError()

        ranked = rank_results(merged)
        return SearchResponse(
            query=query,
            types=[str(kind) for kind in kinds],
            total=len(ranked),
            results=ranked[:limit],
            failed_types=failed,
        )
