"""Configuration for error presentation and logging."""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["GQLErrSettings", "LoggingSettings", "get_settings"]


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: str = Field(default="INFO", description="Log level for application output")
    scrub_fields: Sequence[str] = Field(
        default_factory=lambda: ["password", "token", "secret", "authorization"],
        description="Fields that should be redacted in logs",
    )


class GQLErrSettings(BaseSettings):
    """Process-wide settings, read from ``GQLERR_`` prefixed environment variables."""

    development: bool = Field(
        default=False,
        description="Raise after logging panic-level errors instead of continuing",
    )
    logger_name: str = Field(default="gqlerr", description="Name of the structlog logger errors go to")
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(env_prefix="GQLERR_", env_nested_delimiter="__")


@lru_cache(maxsize=1)
def get_settings() -> GQLErrSettings:
    """Cached accessor used by production code."""
    return GQLErrSettings()
