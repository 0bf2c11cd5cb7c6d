"""Configuration settings for the GoToStudy backend.

Hierarchical configuration using pydantic-settings with field validation,
``.env`` file support and a cached global instance.

Features:
- Nested settings classes with their own environment prefixes
- Root settings read with the ``GOTOSTUDY_`` prefix and ``__`` nesting
- Cross-field validation on the root model
"""

import os
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


class DatabaseSettings(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    url: str = Field(
        "sqlite:///gotostudy.db", description="SQLAlchemy database connection URL"
    )
    pool_size: int = Field(10, ge=1, le=50, description="Database connection pool size")
    pool_timeout: int = Field(
        30, ge=1, le=300, description="Database connection timeout (seconds)"
    )
    echo_sql: bool = Field(False, description="Enable SQL query logging for debugging")

    @property
    def is_sqlite(self) -> bool:
        """Whether the URL points at SQLite."""
        return self.url.startswith("sqlite")


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = Field("0.0.0.0", description="Interface the HTTP server binds to")
    port: int = Field(8080, ge=1, le=65535, description="HTTP server port")
    trusted_proxies: list[str] = Field(
        ["127.0.0.1", "::1", "192.168.0.0/16", "172.16.0.0/12"],
        description="Proxies whose forwarded headers are trusted",
    )


class AppSettings(BaseSettings):
    """Root configuration combining all subsystem settings."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_format: str = Field("text", description="Log output format (text, json)")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_prefix="GOTOSTUDY_",
        extra="ignore",
        validate_default=True,
        case_sensitive=False,
        secrets_dir=os.getenv("GOTOSTUDY_SECRETS_DIR"),
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the logging level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Check the log format name."""
        fmt = v.lower()
        if fmt not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return fmt

    @property
    def effective_log_level(self) -> str:
        """Logging level after applying ``debug_mode``."""
        return "DEBUG" if self.debug_mode else self.log_level

    def get_engine_options(self) -> dict[str, Any]:
        """Keyword arguments for ``create_engine``.

        SQLite connections are shared across the server's worker threads and
        do not take queue pool options.
        """
        options: dict[str, Any] = {"echo": self.database.echo_sql}
        if self.database.is_sqlite:
            options["connect_args"] = {"check_same_thread": False}
        else:
            options["pool_size"] = self.database.pool_size
            options["pool_timeout"] = self.database.pool_timeout
            options["pool_pre_ping"] = True
        return options


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Get cached global settings instance.

    Returns:
        Global AppSettings instance

    """
    return AppSettings()


__all__ = [
    "AppSettings",
    "DatabaseSettings",
    "ServerSettings",
    "get_settings",
]
