"""Tests for the HTTP error envelope."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from assistant_api.db.vector_store import get_vector_store
from assistant_api.main import create_app


@pytest.mark.asyncio
async def test_unexpected_error_uses_envelope():
    broken_store = AsyncMock()
    broken_store.get.side_effect = RuntimeError("store returned nonsense")
    app = create_app()
    app.dependency_overrides[get_vector_store] = lambda: broken_store

    # Starlette re-raises after the 500 is sent; the client only needs the response.
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/tasks/tsk_1")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(client: AsyncClient):
    response = await client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}

