"""
rdbops settings.

Values come from the environment (``RDBOPS_`` prefix) or a ``.env`` file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogFormat(str, Enum):
    """Supported log output formats."""

    JSON = "json"
    TEXT = "text"


class Settings(BaseSettings):
    """Runtime settings shared by the API and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="RDBOPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current environment (development, staging, production, testing)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Application log level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.TEXT,
        description="Log format (json/text)",
    )
    log_file_path: Path | None = Field(
        default=None,
        description="Optional log file path",
    )
    logging_config_path: Path = Field(
        default=Path("config/logging.yaml"),
        description="dictConfig YAML applied instead of programmatic setup when present",
    )

    # History store
    history_file: Path = Field(
        default=Path("history.json"),
        description="JSON file backing the analysis history",
    )
    history_max_entries: int = Field(
        default=100,
        description="Maximum number of history entries kept",
        ge=1,
    )

    # Progress tracking
    progress_max_trackers: int = Field(
        default=256,
        description="Maximum number of progress trackers kept in memory",
        ge=1,
    )
    progress_max_log_lines: int = Field(
        default=1000,
        description="Maximum number of log lines kept per tracker",
        ge=1,
    )
    progress_poll_interval_seconds: float = Field(
        default=1.0,
        description="Interval between server-sent progress events",
        gt=0,
    )

    # Summary building
    prefix_max_depth: int = Field(
        default=3,
        description="Deepest delimiter boundary used when grouping key prefixes",
        ge=1,
    )
    largest_entries_capacity: int = Field(
        default=500,
        description="Largest entries retained by the summary builder",
        ge=1,
    )

    # API Configuration
    api_title: str = Field(
        default="rdbops",
        description="API title shown in the OpenAPI document",
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host",
    )
    api_port: int = Field(
        default=8080,
        description="API port",
    )
    api_log_level: str = Field(
        default="info",
        description="uvicorn log level",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @computed_field
    def is_production(self) -> bool:
        """Production disables the interactive API docs."""
        return self.environment == Environment.PRODUCTION


@lru_cache
def get_settings() -> "Settings":
    """Process-wide settings instance."""
    return Settings()


settings = get_settings()
