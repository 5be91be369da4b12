"""Centralized configuration management for the Prompt MCP system.

This module provides a single source of truth for storage credentials,
the prompts root path, HTTP settings and server options.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices
from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings

from ..paths import normalize_root


class Settings(BaseSettings):
    """Centralized settings for the Prompt MCP system."""

    # === Prompt Storage Configuration ===
    prompts_root_path: str = Field(
        default="/",
        description="Remote folder holding the prompts",
        validation_alias=AliasChoices("PROMPTS_ROOT_PATH", "DROPBOX_ROOT_PATH", "prompts_root_path"),
    )
    storage_provider: Literal["auto", "dropbox", "webdav", "none"] = Field(
        default="auto", description="Storage provider: 'auto', 'dropbox', 'webdav' or 'none'"
    )

    # === Dropbox Credentials ===
    dropbox_access_token: str | None = Field(default=None, description="Dropbox access token")
    dropbox_refresh_token: str | None = Field(default=None, description="Dropbox OAuth refresh token")
    dropbox_app_key: str | None = Field(default=None, description="Dropbox app key (for token refresh)")
    dropbox_app_secret: str | None = Field(default=None, description="Dropbox app secret (for token refresh)")

    # === WebDAV Credentials ===
    webdav_url: str | None = Field(default=None, description="WebDAV endpoint URL")
    webdav_username: str | None = Field(default=None, description="WebDAV username")
    webdav_password: str | None = Field(default=None, description="WebDAV password or app token")
    webdav_recursive: bool = Field(default=False, description="List WebDAV sub-folders recursively")

    # === HTTP Configuration ===
    storage_proxy: str | None = Field(default=None, description="Proxy URL for storage requests")
    request_timeout: float = Field(default=30.0, description="Timeout for storage requests in seconds")

    # === Export Configuration ===
    export_local_dir: str = Field(
        default="~/prompt-mcp-exports",
        description="Local folder for exports when the provider has no share links",
    )

    # === HTTP SSE Server Configuration ===
    sse_host: str = Field(default="localhost", description="SSE server host")
    sse_port: int = Field(default=3001, description="SSE server port")

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
        "populate_by_name": True,
    }

    @field_validator("prompts_root_path")
    @classmethod
    def _normalize_root(cls, value: str) -> str:
        return normalize_root(value)

    @field_validator("storage_provider", mode="before")
    @classmethod
    def _lower_provider(cls, value: str | None) -> str:
        return (value or "auto").strip().lower()

    @property
    def dropbox_configured(self) -> bool:
        """Check if a Dropbox access token or refresh token is present."""
        return bool(_present(self.dropbox_access_token) or _present(self.dropbox_refresh_token))

    @property
    def webdav_configured(self) -> bool:
        """Check if the full WebDAV credential bundle is present."""
        return bool(
            _present(self.webdav_url) and _present(self.webdav_username) and _present(self.webdav_password)
        )

    @property
    def export_local_path(self) -> Path:
        """Get the local export folder as an expanded Path (not created here)."""
        return Path(self.export_local_dir).expanduser()


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        load_dotenv()  # Load .env file
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (primarily for testing)."""
    global _settings
    _settings = None
