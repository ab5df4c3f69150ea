"""Application settings and configuration."""

from functools import lru_cache
from typing import ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Assistant API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Host to bind to")
    port: int = Field(default=3000, description="Port to bind to")
    log_level: str = Field(default="INFO", description="Root log level")

    # CORS
    allowed_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:8080",
            "http://localhost:5173",
        ],
        description="Allowed CORS origins",
    )

    # Vector store HTTP API
    vector_store_url: str = Field(
        default="http://localhost:8000/api/products",
        description="Base URL of the vector store HTTP API",
    )
    vector_store_api_key: str | None = Field(
        default=None, description="Bearer token sent to the vector store"
    )
    vector_store_timeout: float = Field(
        default=30.0, description="Transport timeout in seconds for store calls"
    )

    # Namespacing
    index_prefix: str = Field(
        default="assistant_",
        description="Prefix prepended to each kind's plural noun to name its index",
    )
    shared_index: str | None = Field(
        default=None,
        description="Store every kind in this single index instead of one index per kind",
    )

    # Search
    default_search_type: str = Field(
        default="hybrid", description="Ranking mode used when the caller sends none"
    )
    search_timeout: float = Field(
        default=10.0, description="Per-kind time budget in seconds for search fan-out"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
