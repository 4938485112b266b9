"""
Configuration management using Pydantic Settings
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from project root
# config.py is at: backend/logtail/core/config.py
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "logtail"
    app_env: str = Field(default="development", description="Application environment")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"logtail.core": "DEBUG"})'
    )
    log_format: str = Field(
        default="text",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/logtail.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(
        default=7,
        ge=1,
        description="Number of days to keep log files"
    )

    # Log line rendering
    skipped_line_marker: str = Field(
        default="--- One line skipped ---",
        description="Printed instead of a row that cannot be rendered before the first good line"
    )
    missing_value_marker: str = Field(
        default="(missing)",
        description="Substituted for a placeholder that has no value in the payload"
    )
    empty_ip_placeholder: str = Field(default="-", description="Printed when a row has no IP address")
    line_datetime_format: str = Field(
        default="%d/%b/%Y:%H:%M:%S %z",
        description="strftime format of the timestamp column"
    )
    display_timezone: Optional[str] = Field(
        default=None,
        description="IANA timezone for printed timestamps (e.g. 'UTC'); local time when unset"
    )

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only json and text formats are supported"""
        value = v.strip().lower()
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        env_prefix="LOGTAIL_",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
