"""Client settings using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEARNWITHME_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="learnwithme", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment name"
    )

    # Backend API
    api_url: str = Field(
        default="http://127.0.0.1:3000/graphql", description="GraphQL endpoint"
    )
    request_timeout_seconds: float = Field(
        default=30.0, description="HTTP request timeout"
    )

    # Object storage
    media_base_url: str = Field(
        default="http://127.0.0.1:9000", description="Object storage base URL"
    )
    media_bucket: str = Field(default="learn-with-me", description="Media bucket")
    backend_host: str | None = Field(
        default=None,
        description="Host substituted for 'localhost' in absolute media URLs",
    )

    # Course list fetching
    course_fetch_debounce_seconds: float = Field(
        default=0.5, ge=0, description="Delay before each course list request"
    )
    course_fetch_retry_delay_seconds: float = Field(
        default=2.0, ge=0, description="Delay between automatic retries"
    )
    course_fetch_max_retries: int = Field(
        default=3, ge=0, description="Maximum automatic retries"
    )

    # Playback progress
    progress_report_interval_seconds: float = Field(
        default=10.0, gt=0, description="Seconds between playback progress reports"
    )
    video_completion_threshold: float = Field(
        default=0.9,
        gt=0,
        le=1,
        description="Watched fraction at which a video counts as completed",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log format"
    )
    log_include_caller_info: bool = Field(
        default=False, description="Include caller info"
    )
    log_to_file: bool = Field(default=False, description="Also write JSON log files")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Max size per log file (10MB default)"
    )
    log_file_backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
