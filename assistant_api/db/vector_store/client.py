"""Vector store client implementation.

The store is an external HTTP service that owns persistence, embeddings and
ranking. This client is the only code that talks to it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from assistant_api.features.entities.models import Entity
from assistant_api.features.entities.registry import EntityKind, get_kind_spec

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 10
DEFAULT_SEARCH_TYPE = "hybrid"


class StoreError(Exception):
    """Base class for vector store failures."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code: int | None = status_code
        self.body: str = body


class StoreWriteError(StoreError):
    """Raised when an upsert or delete is rejected by the store."""

    pass


class StoreReadError(StoreError):
    """Raised when a get, search or stats call is rejected by the store."""

    pass


@dataclass
class SearchPage:
    """One ranked page of raw search hits from a single index."""

    results: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0


@dataclass
class IndexStats:
    """Document count of one index."""

    total: int = 0
    has_data: bool = False


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class VectorStoreClient:
    """HTTP client for the vector store API.

    Each kind lives in its own index named ``index_prefix + plural``
    (``assistant_tasks``), unless ``shared_index`` is set, in which case all
    kinds share that index and searches are pinned to a kind by an
    ``entity_type`` filter.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        index_prefix: str = "",
        shared_index: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url: str = base_url.rstrip("/")
        self.index_prefix: str = index_prefix
        self.shared_index: str | None = shared_index

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    def index_name(self, kind: EntityKind) -> str:
        """Return the index that stores ``kind``."""
        if self.shared_index:
            return self.shared_index
        return f"{self.index_prefix}{get_kind_spec(kind).plural}"

    async def _request(
        self,
        method: str,
        url: str,
        error_cls: type[StoreError],
        action: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            return await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Vector store unreachable during %s: %s", action, e)
            raise error_cls(f"Failed to {action}: {e}") from e

    @staticmethod
    def _fail(
        response: httpx.Response, error_cls: type[StoreError], action: str
    ) -> StoreError:
        logger.error(
            "Vector store rejected %s with %d: %s",
            action,
            response.status_code,
            response.text,
        )
        return error_cls(
            f"Failed to {action}: {response.text}",
            status_code=response.status_code,
            body=response.text,
        )

    @staticmethod
    def _json(
        response: httpx.Response,
        error_cls: type[StoreError],
        action: str,
        expected: type | tuple[type, ...],
    ) -> Any:
        """Decode a 2xx body, failing with ``error_cls`` on a bad payload."""
        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "Vector store sent a non-JSON reply to %s: %.200s", action, response.text
            )
            raise error_cls(
                f"Failed to {action}: invalid JSON reply",
                status_code=response.status_code,
                body=response.text,
            ) from e
        if not isinstance(data, expected):
            logger.error(
                "Vector store sent an unexpected %s reply to %s",
                type(data).__name__,
                action,
            )
            raise error_cls(
                f"Failed to {action}: unexpected reply shape",
                status_code=response.status_code,
                body=response.text,
            )
        return data

    @staticmethod
    def _to_entity(data: Any, error_cls: type[StoreError], action: str) -> Entity:
        try:
            return Entity.model_validate(data)
        except ValidationError as e:
            raise error_cls(f"Failed to {action}: malformed record ({e})") from e

    async def upsert(self, kind: EntityKind, entity: Entity) -> Entity:
        """Create or replace ``entity`` in the kind's index.

        Stamps ``updated_at`` with the current time and ``created_at`` with
        the entity's own value, or the same current time on first write.

        Returns:
            The entity as persisted.

        Raises:
            StoreWriteError: If the store does not answer 2xx.
        """
        now = utc_now_iso()
        record = entity.to_record()
        record.update(
            description=entity.description or "",
            entity_type=str(kind),
            updated_at=now,
            created_at=entity.created_at or now,
        )

        action = f"upsert {kind}"
        response = await self._request(
            "POST",
            "/product",
            StoreWriteError,
            action,
            json={**record, "index": self.index_name(kind)},
        )
        if not response.is_success:
            raise self._fail(response, StoreWriteError, action)

        return Entity.model_validate(record)

    async def get(self, kind: EntityKind, entity_id: str) -> Entity | None:
        """Fetch one entity.

        None when the store reports 404, sends an empty body, or answers with
        records whose ``id`` is not ``entity_id``.
        """
        action = f"get {kind}"
        response = await self._request(
            "GET",
            "/product",
            StoreReadError,
            action,
            params={"index": self.index_name(kind), "id": entity_id},
        )
        if response.status_code == 404:
            return None
        if not response.is_success:
            raise self._fail(response, StoreReadError, action)

        if not response.content:
            return None
        data = self._json(response, StoreReadError, action, (dict, list))
        candidates = data if isinstance(data, list) else [data]
        for item in candidates:
            if isinstance(item, dict) and item.get("id") == entity_id:
                return self._to_entity(item, StoreReadError, action)
        return None

    async def get_many(self, kind: EntityKind, ids: list[str]) -> list[Entity]:
        """Fetch several entities of one kind in a single call."""
        if not ids:
            return []

        action = f"get {kind}s"
        response = await self._request(
            "GET",
            "/product",
            StoreReadError,
            action,
            params={"index": self.index_name(kind), "id": ",".join(ids)},
        )
        if response.status_code == 404:
            return []
        if not response.is_success:
            raise self._fail(response, StoreReadError, action)

        if not response.content:
            return []
        data = self._json(response, StoreReadError, action, (dict, list))
        items = data if isinstance(data, list) else [data]
        return [self._to_entity(item, StoreReadError, action) for item in items if item]

    async def delete(self, kind: EntityKind, ids: list[str]) -> None:
        """Delete entities by ID.

        A 404 from the store is treated as success so that deleting an
        absent ID looks the same as deleting a present one.
        """
        if not ids:
            return

        action = f"delete {kind}"
        response = await self._request(
            "DELETE",
            "/product",
            StoreWriteError,
            action,
            json={"index": self.index_name(kind), "ids": ids},
        )
        if response.status_code == 404:
            return
        if not response.is_success:
            raise self._fail(response, StoreWriteError, action)

    async def search(
        self,
        kind: EntityKind,
        query: str | None = None,
        filters: dict[str, Any] | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        search_type: str = DEFAULT_SEARCH_TYPE,
    ) -> SearchPage:
        """Run one ranked query against the kind's index.

        The query is lower-cased here and nowhere else.
        """
        search_filters = dict(filters or {})
        if self.shared_index:
            search_filters["entity_type"] = str(kind)

        action = f"search {kind}"
        response = await self._request(
            "POST",
            "/search",
            StoreReadError,
            action,
            json={
                "index": self.index_name(kind),
                "query": query.lower() if query else query,
                "filters": search_filters,
                "limit": limit or DEFAULT_SEARCH_LIMIT,
                "type": search_type or DEFAULT_SEARCH_TYPE,
            },
        )
        if not response.is_success:
            raise self._fail(response, StoreReadError, action)

        data = self._json(response, StoreReadError, action, (dict, list))
        results = data if isinstance(data, list) else data.get("results") or []
        if not isinstance(results, list) or not all(
            isinstance(hit, dict) for hit in results
        ):
            logger.error("Vector store sent malformed hits to %s", action)
            raise StoreReadError(
                f"Failed to {action}: unexpected reply shape",
                status_code=response.status_code,
                body=response.text,
            )

        total = data.get("total") if isinstance(data, dict) else None
        if not isinstance(total, int) or isinstance(total, bool) or not total:
            total = len(results)
        return SearchPage(results=results, total=total)

    async def get_stats(self, kind: EntityKind) -> IndexStats:
        """Return document counts; an index that does not exist yet is empty."""
        index = self.index_name(kind)
        action = f"get stats for {kind}"
        response = await self._request(
            "GET", f"/stats/{index}", StoreReadError, action
        )
        if response.status_code == 404:
            return IndexStats()
        if not response.is_success:
            raise self._fail(response, StoreReadError, action)

        data = self._json(response, StoreReadError, action, dict)
        total = data.get("total_products")
        return IndexStats(
            total=total if isinstance(total, int) and not isinstance(total, bool) else 0,
            has_data=bool(data.get("has_data")),
        )
