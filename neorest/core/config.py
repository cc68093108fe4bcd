"""
Configuration module for neorest.

Uses pydantic-settings for environment-based configuration of the
Neo4j REST endpoint and HTTP transport.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Client settings loaded from environment variables.

    The REST URL points at the server's data root (the path every
    relative request path is joined onto).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===========================================
    # NEO4J REST CONFIGURATION
    # ===========================================
    neo4j_rest_url: str = Field(
        default="http://localhost:7474/db/data",
        description="Neo4j REST API data root",
    )
    neo4j_user: str | None = Field(
        default=None,
        description="Username for HTTP basic auth",
    )
    neo4j_password: str | None = Field(
        default=None,
        description="Password for HTTP basic auth",
    )

    # ===========================================
    # TRANSPORT CONFIGURATION
    # ===========================================
    neo4j_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
