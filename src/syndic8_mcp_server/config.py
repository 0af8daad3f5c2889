"""Configuration management for Syndic8 MCP Server."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from syndic8_mcp_server.api.client import DEFAULT_ENDPOINT


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Syndic8 XML-RPC Configuration
    syndic8_endpoint: str = DEFAULT_ENDPOINT
    syndic8_username: str | None = None
    syndic8_password: str | None = None

    # Optional settings with defaults
    request_timeout: int = 30
    default_max_results: int = -1

    # MCP Server Configuration
    mcp_transport: Literal["stdio", "sse"] = "sse"
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8080

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings loaded from environment.

    Raises:
        ValidationError: If a setting has an invalid value.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
