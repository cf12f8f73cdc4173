"""Configuration management for the container lifecycle API.

Settings are flat fields read from the environment (or a ``.env`` file).

Usage:
    from dockctl.config import settings

    settings.api_port
    settings.delete_max_retries
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .languages import (
    LANGUAGES,
    LanguageConfig,
    get_language,
    get_supported_languages,
    is_supported_language,
    normalize_language,
)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=4000, ge=1, le=65535)
    api_debug: bool = Field(default=False)
    api_reload: bool = Field(default=False)

    # Docker Configuration
    docker_base_url: str | None = Field(
        default="unix:///var/run/docker.sock",
        description="Docker daemon URL (empty = use DOCKER_HOST / docker.from_env)",
    )
    docker_timeout: int = Field(default=60, ge=1, le=600)

    # Deletion Reconciler Configuration
    delete_poll_interval: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Seconds between status polls while a container is restarting",
    )
    delete_max_retries: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Maximum status polls while a container is restarting",
    )

    # Ephemeral Runner Configuration
    runner_stop_timeout: int = Field(
        default=1,
        ge=0,
        le=60,
        description="Grace period in seconds when stopping a runner container",
    )
    runner_python_image: str = Field(default="python:3-slim")
    runner_node_image: str = Field(default="node:lts-alpine")
    pull_missing_images: bool = Field(
        default=True,
        description="Pull images that are not present locally before creating containers",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "console"] = Field(default="json")
    log_file: str | None = Field(default=None)
    log_max_size_mb: int = Field(default=100, ge=1)
    log_backup_count: int = Field(default=5, ge=1)
    enable_access_logs: bool = Field(default=True)

    # Development Configuration
    enable_cors: bool = Field(default=False)
    cors_origins: list[str] = Field(default_factory=list)
    enable_docs: bool = Field(default=True)

    @field_validator("docker_base_url", mode="before")
    @classmethod
    def empty_base_url_is_none(cls, v):
        """Treat an empty DOCKER_BASE_URL as "use the environment"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v):
        """Accept LOG_FORMAT in any case."""
        return v.lower() if isinstance(v, str) else v

    def get_image_for_language(self, code: str) -> str:
        """Get the runner image for a language, honouring image overrides."""
        overrides = {
            "python": self.runner_python_image,
            "javascript": self.runner_node_image,
        }
        canonical = normalize_language(code)
        if canonical in overrides:
            return overrides[canonical]

        lang = get_language(canonical)
        if lang:
            return lang.image
        raise ValueError(f"Unsupported language: {code}")


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "LANGUAGES",
    "LanguageConfig",
    "get_language",
    "get_supported_languages",
    "is_supported_language",
    "normalize_language",
]
