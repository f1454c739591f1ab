"""
Application settings and configuration management.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from linkscout import __version__

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = Field(default="linkscout")
    app_version: str = Field(default=__version__)
    log_level: str = Field(default="WARNING")

    # HTTP
    user_agent: str = Field(default=_DEFAULT_USER_AGENT)
    accept_language: str = Field(default="en-US,en;q=0.9")
    lookup_timeout: float = Field(default=5.0)
    page_timeout: float = Field(default=15.0)
    max_page_bytes: int = Field(default=5 * 1024 * 1024)

    # Extraction
    max_json_scan_chars: int = Field(default=2_000_000)
    max_title_length: int = Field(default=200)
    max_description_length: int = Field(default=2000)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @field_validator("lookup_timeout", "page_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Timeouts must be positive; an unbounded read is never allowed."""
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v

    @field_validator(
        "max_page_bytes",
        "max_json_scan_chars",
        "max_title_length",
        "max_description_length",
    )
    @classmethod
    def validate_positive_limit(cls, v: int) -> int:
        """Validate size limits."""
        if v <= 0:
            raise ValueError(f"Limit must be positive, got {v}")
        return v

    model_config = SettingsConfigDict(
        env_prefix="LINKSCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


# Global settings instance
settings = get_settings()
