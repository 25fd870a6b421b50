"""Configuration management for mytodo using Pydantic Settings."""

from datetime import datetime
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings configurable via environment variables and .env file.

    Environment variables must be prefixed with MYTODO_.
    Example: MYTODO_DATA_FILE=~/todos.json
    """

    model_config = SettingsConfigDict(  # pyright: ignore[reportUnannotatedClassAttribute]
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MYTODO_",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Storage ---

    DATA_FILE: Path = Field(
        default=Path.home() / ".mytodo" / "todos.json",
        description="Key-value JSON file holding the persisted task list.",
    )

    STORAGE_KEY: str = Field(
        default="todos",
        description="Key under which the task list is stored in DATA_FILE.",
    )

    @field_validator("DATA_FILE")
    @classmethod
    def expand_data_file(cls, v: Path) -> Path:
        return v.expanduser()

    # --- Logging ---

    LOG_DIR: Path = Field(
        default=Path.home() / ".mytodo" / "logs",
        description="Directory for JSONL log files.",
    )

    LOG_LEVEL: str = Field(
        default="WARNING",
        description="Console log level (DEBUG, INFO, WARNING, ERROR).",
    )

    @field_validator("LOG_DIR")
    @classmethod
    def ensure_log_dir(cls, v: Path) -> Path:
        v = v.expanduser()
        v.mkdir(parents=True, exist_ok=True)
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def log_file(self) -> Path:
        """Daily log file path inside LOG_DIR."""
        return self.LOG_DIR / f"mytodo_{datetime.now().strftime('%Y%m%d')}.jsonl"


# Global settings instance
settings = Settings()
