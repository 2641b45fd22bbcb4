"""
Application settings and configuration management.
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


SNAPSHOT_BACKENDS = ("json", "sql", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Configuration
    app_name: str = Field("Provenance Registry API", description="Service name")
    app_env: str = Field("development", description="Application environment")
    app_debug: bool = Field(False, description="Debug mode")

    # API Configuration
    api_v1_prefix: str = Field("/api/v1", description="API v1 prefix")
    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(8000, description="Bind port")
    cors_origins: List[str] = Field(
        ["http://localhost:3000", "http://localhost:8000"],
        description="CORS allowed origins"
    )

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field("json", description="Log format (json or console)")

    # Persistence Configuration
    snapshot_backend: str = Field("json", description="Snapshot backend: json, sql or memory")
    snapshot_path: str = Field(
        "storage/registry_snapshot.json",
        description="Snapshot file used by the json backend"
    )
    database_url: str = Field(
        "sqlite:///storage/registry.db",
        description="SQLAlchemy URL used by the sql backend"
    )
    restore_on_startup: bool = Field(True, description="Restore the last snapshot on startup")
    persist_on_shutdown: bool = Field(True, description="Write a snapshot on shutdown")

    @field_validator("snapshot_backend")
    @classmethod
    def validate_snapshot_backend(cls, v: str) -> str:
        """Validate snapshot backend name."""
        v = v.strip().lower()
        if v not in SNAPSHOT_BACKENDS:
            raise ValueError(f"snapshot_backend must be one of {', '.join(SNAPSHOT_BACKENDS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        v = v.strip().lower()
        if v not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
