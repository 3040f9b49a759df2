"""Configuration settings module using Pydantic Settings.

This module provides centralized configuration management with support for
environment variables (prefixed with ``MLFRAME_``) and ``.env`` files.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Supported log formats."""

    JSON = "json"
    CONSOLE = "console"


class StorageBackend(str, Enum):
    """Supported storage connector backends."""

    MEMORY = "memory"
    REDIS = "redis"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Environment
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    log_file: Optional[Path] = Field(
        default=None,
        description="Log file path",
    )

    # Storage
    storage_backend: StorageBackend = Field(
        default=StorageBackend.MEMORY,
        description="Storage connector backing dataframes and knowledge bases",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (redis backend only)",
    )
    redis_key_prefix: str = Field(
        default="mlframe",
        description="Prefix of every Redis key written by the redis backend",
        min_length=1,
    )

    # Cross-validation
    cv_folds: int = Field(
        default=10,
        description="Default number of folds for k-fold cross-validation",
    )
    cv_shuffle: bool = Field(
        default=False,
        description="Permute row ids before assigning folds",
    )
    cv_random_seed: int = Field(
        default=42,
        description="Seed used when cv_shuffle is enabled",
    )

    # CSV ingestion
    csv_delimiter: str = Field(
        default=",",
        description="Default CSV field delimiter",
    )
    csv_quotechar: str = Field(
        default='"',
        description="Default CSV quote character",
    )

    model_config = SettingsConfigDict(
        env_prefix="MLFRAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_log_dir(cls, v: Optional[str]) -> Optional[Path]:
        """Create log directory if it doesn't exist."""
        if v is not None:
            log_path = Path(v)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            return log_path
        return None

    @field_validator("cv_folds")
    @classmethod
    def validate_cv_folds(cls, v: int) -> int:
        """Validate that cross-validation uses at least two folds."""
        if v < 2:
            raise ValueError("cv_folds must be >= 2")
        return v

    @field_validator("csv_delimiter", "csv_quotechar")
    @classmethod
    def validate_single_char(cls, v: str) -> str:
        """CSV delimiter and quote must be a single character."""
        if len(v) != 1:
            raise ValueError(f"must be a single character, got {v!r}")
        return v

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings (useful for testing).

    Returns:
        New Settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
