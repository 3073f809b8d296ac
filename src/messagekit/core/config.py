"""Configuration management using Pydantic settings."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RedisSettings(BaseSettings):
    """Redis connection settings."""

    model_config = SettingsConfigDict(env_prefix="REDIS_")

    url: SecretStr = Field(
        default=SecretStr("redis://127.0.0.1:6379"),
        description="Redis connection URL",
    )
    max_connections: int = Field(default=10, ge=1)
    # Must stay above the blocking stream read
    socket_timeout: float = Field(default=5.0, gt=0)
    socket_connect_timeout: float = Field(default=5.0, gt=0)


class StreamSettings(BaseSettings):
    """Consumer settings for message streams."""

    model_config = SettingsConfigDict(env_prefix="STREAM_")

    consumer_id: str = Field(
        default="0",
        validation_alias=AliasChoices("MESSAGEKIT_STREAM_CONSUMER_ID", "pm_id"),
        description="Consumer name inside the group (process manager id by default)",
    )
    block_ms: int = Field(
        default=2000,
        ge=0,
        description="Block time in ms when waiting for new entries",
    )
    claim_min_idle_ms: int = Field(
        default=0,
        ge=0,
        description="Minimum idle time before a pending entry is reclaimed",
    )
    max_processed_ids: int = Field(
        default=10000,
        ge=1,
        description="Acknowledged ids buffered before they are deleted from the stream",
    )


class ObservabilitySettings(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_")

    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: Literal["json", "console"] = Field(default="json")
    service_name: str = Field(default="messagekit")


class Settings(BaseSettings):
    """Main settings."""

    model_config = SettingsConfigDict(
        env_prefix="MESSAGEKIT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    redis: RedisSettings = Field(default_factory=RedisSettings)
    stream: StreamSettings = Field(default_factory=StreamSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def load(cls) -> Settings:
        """Load settings from environment."""
        return cls()


# Global settings instance (lazy loaded)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def configure_settings(settings: Settings | None) -> None:
    """Configure the global settings instance (for testing)."""
    global _settings
    _settings = settings
