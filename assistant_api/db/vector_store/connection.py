"""Vector store client lifecycle.

The client is built once per application in the lifespan handler and kept
on ``app.state``; routes receive it through the ``get_vector_store``
dependency, which tests override.
"""

from fastapi import FastAPI, Request

from assistant_api.core.settings import Settings

from .client import VectorStoreClient


def create_vector_store(settings: Settings) -> VectorStoreClient:
    """Build a client from settings."""
    return VectorStoreClient(
        base_url=settings.vector_store_url,
        api_key=settings.vector_store_api_key,
        index_prefix=settings.index_prefix,
        shared_index=settings.shared_index,
        timeout=settings.vector_store_timeout,
    )


async def open_vector_store(app: FastAPI, settings: Settings) -> VectorStoreClient:
    """Create the client and attach it to the application."""
    client = create_vector_store(settings)
    app.state.vector_store = client
    return client


async def close_vector_store(app: FastAPI) -> None:
    """Close the application's client, if any."""
    client: VectorStoreClient | None = getattr(app.state, "vector_store", None)
    if client is not None:
        await client.aclose()
        app.state.vector_store = None


def get_vector_store(request: Request) -> VectorStoreClient:
    """Get the application's vector store client as a dependency."""
    return request.app.state.vector_store
