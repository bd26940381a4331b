"""Pydantic models for configuration validation."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class LogLevel(StrEnum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    NOTSET = "NOTSET"


class LogLevelsConfig(BaseModel):
    """Log levels configuration."""

    console: LogLevel = LogLevel.INFO
    main_file: LogLevel = LogLevel.DEBUG


class LoggingConfig(BaseModel):
    """Logging configuration."""

    # Relative to logs_base_dir; console-only logging when unset
    main_log_file: str | None = None
    levels: LogLevelsConfig = Field(default_factory=LogLevelsConfig)


class QualityConfig(BaseModel):
    """Quality metrics configuration."""

    # Assumed playback length used for the size estimate (two hours)
    reference_duration_seconds: int = Field(default=7200, gt=0)


class AppConfig(BaseModel):
    """Main application configuration model."""

    logs_base_dir: str = "logs"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    quality: QualityConfig = Field(default_factory=QualityConfig)
