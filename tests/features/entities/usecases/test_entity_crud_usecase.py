"""Tests for the generic per-kind CRUD use case."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from assistant_api.db.vector_store.client import SearchPage, StoreWriteError
from assistant_api.features.entities.errors import (
    EntityNotFoundError,
    EntityOperationError,
    InvalidEntityError,
)
from assistant_api.features.entities.registry import (
    ENTITY_KINDS,
    EntityKind,
    get_kind_spec,
)
from assistant_api.features.entities.usecases import EntityCrudUseCaseImpl
from tests.utils.fake_store import InMemoryEntityStore

REQUIRED_FIELDS = {
    EntityKind.EVENT: {"start_time": "2026-11-01T09:00:00Z"},
    EntityKind.REMINDER: {"remind_at": "2026-11-01T08:00:00Z"},
}


def make_use_case(store, kind: EntityKind) -> EntityCrudUseCaseImpl:
    return EntityCrudUseCaseImpl(store=store, spec=get_kind_spec(kind))


@pytest.fixture
def tasks(store: InMemoryEntityStore) -> EntityCrudUseCaseImpl:
    return make_use_case(store, EntityKind.TASK)


@pytest.fixture
def events(store: InMemoryEntityStore) -> EntityCrudUseCaseImpl:
    return make_use_case(store, EntityKind.EVENT)


class TestCreate:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", ENTITY_KINDS)
    async def test_create_then_get_round_trips_for_every_kind(self, store, kind):
        use_case = make_use_case(store, kind)

        created = await use_case.create({"title": "Thing", **REQUIRED_FIELDS.get(kind, {})})
        fetched = await use_case.get(created.id)

        assert fetched.id == created.id
        assert fetched.created_at == fetched.updated_at
        assert fetched.title == "Thing"

    @pytest.mark.asyncio
    async def test_create_requires_title(self, tasks, store):
        with pytest.raises(InvalidEntityError, match="title is required"):
            await tasks.create({"description": "no title"})
        assert store.records == {}

    @pytest.mark.asyncio
    async def test_create_rejects_blank_title(self, tasks):
        with pytest.raises(InvalidEntityError):
            await tasks.create({"title": "   "})

    @pytest.mark.asyncio
    async def test_event_requires_start_time(self, events):
        with pytest.raises(InvalidEntityError, match="start_time"):
            await events.create({"title": "Dentist"})

    @pytest.mark.asyncio
    async def test_event_with_start_time_is_created(self, events):
        created = await events.create(
            {"title": "Dentist", "start_time": "2026-11-01T09:00:00Z"}
        )

        assert created.id.startswith("evt_")
        assert created.model_extra["start_time"] == "2026-11-01T09:00:00Z"

    @pytest.mark.asyncio
    async def test_reminder_requires_remind_at(self, store):
        reminders = make_use_case(store, EntityKind.REMINDER)

        with pytest.raises(InvalidEntityError, match="remind_at"):
            await reminders.create({"title": "Call mom"})

    @pytest.mark.asyncio
    async def test_client_supplied_id_is_kept(self, tasks):
        created = await tasks.create({"id": "tsk_custom1", "title": "Mine"})

        assert created.id == "tsk_custom1"

    @pytest.mark.asyncio
    async def test_client_supplied_id_with_foreign_prefix_is_rejected(self, tasks):
        with pytest.raises(InvalidEntityError, match="tsk_"):
            await tasks.create({"id": "evt_custom1", "title": "Mine"})

    @pytest.mark.asyncio
    async def test_client_timestamps_are_ignored(self, tasks):
        created = await tasks.create(
            {"title": "Old", "created_at": "1999-01-01T00:00:00Z"}
        )

        assert created.created_at != "1999-01-01T00:00:00Z"
        assert created.created_at == created.updated_at

    @pytest.mark.asyncio
    async def test_store_failure_becomes_generic_error(self):
        failing = AsyncMock()
        failing.upsert.side_effect = StoreWriteError(
            "Failed to upsert task: boom", status_code=502, body="boom"
        )
        use_case = make_use_case(failing, EntityKind.TASK)

        with pytest.raises(EntityOperationError) as exc_info:
            await use_case.create({"title": "Doomed"})

        assert str(exc_info.value) == "Failed to create task"


class TestList:
    @pytest.mark.asyncio
    async def test_empty_filter_values_are_dropped(self):
        mock_store = AsyncMock()
        mock_store.search.return_value = SearchPage(results=[{"id": "tsk_1"}], total=1)
        use_case = make_use_case(mock_store, EntityKind.TASK)

        result = await use_case.list_entities(
            query="milk",
            limit=5,
            filters={"status": "pending", "priority": "", "person_id": None},
        )

        assert result.total == 1
        mock_store.search.assert_called_once_with(
            EntityKind.TASK,
            query="milk",
            filters={"status": "pending"},
            limit=5,
        )

    @pytest.mark.asyncio
    async def test_no_filters_sends_none(self):
        mock_store = AsyncMock()
        mock_store.search.return_value = SearchPage()
        use_case = make_use_case(mock_store, EntityKind.TASK)

        await use_case.list_entities(filters={"status": ""})

        assert mock_store.search.call_args.kwargs["filters"] is None


class TestUpdate:
    @pytest.mark.asyncio
    async def test_replace_keeps_path_id_and_created_at(self, tasks):
        created = await tasks.create({"title": "Buy milk", "priority": "high"})

        replaced = await tasks.replace(
            created.id,
            {"id": "tsk_hijack", "title": "Buy oat milk", "created_at": "1999-01-01"},
        )

        assert replaced.id == created.id
        assert replaced.created_at == created.created_at
        assert replaced.title == "Buy oat milk"

    @pytest.mark.asyncio
    async def test_replace_clears_fields_missing_from_body(self, tasks):
        created = await tasks.create({"title": "Buy milk", "priority": "high"})

        replaced = await tasks.replace(created.id, {"title": "Buy bread"})

        assert "priority" not in replaced.model_extra

    @pytest.mark.asyncio
    async def test_patch_keeps_fields_missing_from_body(self, tasks):
        created = await tasks.create({"title": "Buy milk", "priority": "high"})

        patched = await tasks.patch(created.id, {"status": "completed", "id": "tsk_x"})

        assert patched.id == created.id
        assert patched.title == "Buy milk"
        assert patched.model_extra["priority"] == "high"
        assert patched.model_extra["status"] == "completed"
        assert patched.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_patch_cannot_blank_required_field(self, events):
        created = await events.create(
            {"title": "Dentist", "start_time": "2026-11-01T09:00:00Z"}
        )

        with pytest.raises(InvalidEntityError, match="start_time"):
            await events.patch(created.id, {"start_time": ""})

    @pytest.mark.asyncio
    async def test_update_of_missing_entity_is_not_found(self, tasks):
        with pytest.raises(EntityNotFoundError):
            await tasks.replace("tsk_missing", {"title": "x"})
        with pytest.raises(EntityNotFoundError):
            await tasks.patch("tsk_missing", {"title": "x"})


class TestGetAndDelete:
    @pytest.mark.asyncio
    async def test_get_missing_is_not_found(self, tasks):
        with pytest.raises(EntityNotFoundError, match="task not found"):
            await tasks.get("tsk_missing")

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, tasks):
        created = await tasks.create({"title": "Temporary"})

        await tasks.delete(created.id)
        await tasks.delete(created.id)
        await tasks.delete("tsk_never_existed")

        with pytest.raises(EntityNotFoundError):
            await tasks.get(created.id)


@pytest_asyncio.fixture
async def event_id(events) -> str:
    created = await events.create(
        {"title": "Dentist", "start_time": "2026-11-01T09:00:00Z"}
    )
    return created.id


class TestForeignKindIds:
    @pytest.mark.asyncio
    async def test_get_of_other_kind_is_not_found(self, tasks, event_id):
        with pytest.raises(EntityNotFoundError, match="task not found"):
            await tasks.get(event_id)

    @pytest.mark.asyncio
    async def test_patch_cannot_move_entity_to_other_kind(self, tasks, store, event_id):
        with pytest.raises(EntityNotFoundError):
            await tasks.patch(event_id, {"status": "completed"})

        assert store.records[EntityKind.EVENT][event_id]["entity_type"] == "event"
        assert event_id not in store.records.get(EntityKind.TASK, {})

    @pytest.mark.asyncio
    async def test_replace_of_other_kind_is_not_found(self, tasks, event_id):
        with pytest.raises(EntityNotFoundError):
            await tasks.replace(event_id, {"title": "Hijacked"})

    @pytest.mark.asyncio
    async def test_delete_of_other_kind_is_not_found(self, tasks, store, event_id):
        with pytest.raises(EntityNotFoundError):
            await tasks.delete(event_id)

        assert event_id in store.records[EntityKind.EVENT]

    @pytest.mark.asyncio
    async def test_store_is_not_consulted_for_foreign_ids(self):
        mock_store = AsyncMock()
        use_case = make_use_case(mock_store, EntityKind.TASK)

        with pytest.raises(EntityNotFoundError):
            await use_case.get("evt_123")
        with pytest.raises(EntityNotFoundError):
            await use_case.get("no-delimiter")

        mock_store.get.assert_not_called()


class TestPayloadShape:
    @pytest.mark.asyncio
    async def test_non_string_title_is_invalid(self, tasks, store):
        with pytest.raises(InvalidEntityError, match="title"):
            await tasks.create({"title": 42})
        assert store.records == {}
