"""Pytest configuration and shared fixtures for all tests.

Route tests run the real application in-process over
``httpx.ASGITransport`` with the vector store dependency replaced by an
in-memory store.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from assistant_api.db.vector_store import get_vector_store
from assistant_api.main import create_app
from tests.utils.fake_store import InMemoryEntityStore


@pytest.fixture
def store() -> InMemoryEntityStore:
    """Provide an empty in-memory store."""
    return InMemoryEntityStore()


@pytest.fixture
def app(store: InMemoryEntityStore) -> FastAPI:
    """Create the application wired to the in-memory store."""
    app = create_app()
    app.dependency_overrides[get_vector_store] = lambda: store
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client bound to the application."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as http_client:
        yield http_client
