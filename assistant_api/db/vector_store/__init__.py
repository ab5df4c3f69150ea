"""Module for the vector store client and its lifecycle."""

from .client import (
    IndexStats,
    SearchPage,
    StoreError,
    StoreReadError,
    StoreWriteError,
    VectorStoreClient,
)
from .connection import (
    close_vector_store,
    create_vector_store,
    get_vector_store,
    open_vector_store,
)

__all__ = [
    "VectorStoreClient",
    "SearchPage",
    "IndexStats",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "create_vector_store",
    "open_vector_store",
    "close_vector_store",
    "get_vector_store",
]
