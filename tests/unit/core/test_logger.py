"""Unit tests for logger module."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from logging.handlers import QueueHandler
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from rich.logging import RichHandler

from core.logger import (
    LEVEL_ABBREV,
    CompactFormatter,
    LoggerFilter,
    SafeQueueListener,
    create_fallback_loggers,
    ensure_directory,
    get_full_log_path,
    get_log_levels_from_config,
    get_loggers,
    get_shared_console,
)
from core.models.config_models import AppConfig, LoggingConfig, LogLevel, LogLevelsConfig

if TYPE_CHECKING:
    from pathlib import Path

MANAGED_LOGGERS = ("console_logger", "error_logger", "config")


def _record(name: str = "console_logger", level: int = logging.INFO, msg: str = "message") -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


@pytest.fixture
def clean_loggers() -> Iterator[None]:
    """Remove handlers from the managed loggers before and after a test."""

    def _reset() -> None:
        for name in MANAGED_LOGGERS:
            logger = logging.getLogger(name)
            for handler in [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]:
                logger.removeHandler(handler)
                if not isinstance(handler, RichHandler):
                    handler.close()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True

    _reset()
    yield
    _reset()


class TestEnsureDirectory:
    """Tests for ensure_directory function."""

    def test_creates_nested_directories(self, tmp_path: Path) -> None:
        """Should create nested directories."""
        nested = tmp_path / "a" / "b" / "c"
        ensure_directory(str(nested))
        assert nested.is_dir()

    def test_existing_directory(self, tmp_path: Path) -> None:
        """Should not fail if directory already exists."""
        ensure_directory(tmp_path)
        assert tmp_path.is_dir()

    def test_handles_empty_path(self) -> None:
        """Should handle empty path without error."""
        ensure_directory("")

    def test_raises_when_blocked_by_file(self, tmp_path: Path) -> None:
        """Should let creation failures propagate to the caller."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(OSError):
            ensure_directory(blocker / "sub")


class TestCompactFormatter:
    """Tests for CompactFormatter."""

    @pytest.mark.parametrize(("level", "abbrev"), [(logging.DEBUG, "D"), (logging.WARNING, "W"), (logging.CRITICAL, "C")])
    def test_abbreviates_level(self, level: int, abbrev: str) -> None:
        """Should replace the level name with its abbreviation."""
        formatted = CompactFormatter(fmt="%(levelname)s %(message)s").format(_record(level=level))
        assert formatted == f"{abbrev} message"
        assert LEVEL_ABBREV[logging.getLevelName(level)] == abbrev

    def test_restores_level_name(self) -> None:
        """Should leave the record's level name intact for other handlers."""
        record = _record(level=logging.ERROR)
        CompactFormatter().format(record)
        assert record.levelname == "ERROR"

    def test_default_format_includes_logger_name(self) -> None:
        """Default format should include the logger name."""
        formatted = CompactFormatter().format(_record(name="config"))
        assert " I [config] message" in formatted


class TestLoggerFilter:
    """Tests for LoggerFilter."""

    def test_allows_listed_logger(self) -> None:
        """Should pass records from listed loggers."""
        assert LoggerFilter(["error_logger"]).filter(_record(name="error_logger"))

    def test_allows_child_logger(self) -> None:
        """Should pass records from child loggers."""
        assert LoggerFilter(["config"]).filter(_record(name="config.loader"))

    def test_rejects_other_logger(self) -> None:
        """Should reject records from other loggers."""
        assert not LoggerFilter(["config"]).filter(_record(name="configuration"))


class TestConfigHelpers:
    """Tests for path and level helpers."""

    def test_no_log_file_by_default(self) -> None:
        """File logging should be disabled by default."""
        assert get_full_log_path(AppConfig()) is None

    def test_relative_log_file(self, tmp_path: Path) -> None:
        """Relative log files should live under logs_base_dir."""
        config = AppConfig(logs_base_dir=str(tmp_path), logging=LoggingConfig(main_log_file="main/quality.log"))
        assert get_full_log_path(config) == tmp_path / "main" / "quality.log"

    def test_absolute_log_file(self, tmp_path: Path) -> None:
        """Absolute log files should be used as given."""
        log_file = tmp_path / "quality.log"
        config = AppConfig(logs_base_dir="/elsewhere", logging=LoggingConfig(main_log_file=str(log_file)))
        assert get_full_log_path(config) == log_file

    def test_levels(self) -> None:
        """Should map level names to logging constants."""
        config = AppConfig(logging=LoggingConfig(levels=LogLevelsConfig(console=LogLevel.WARNING, main_file=LogLevel.INFO)))
        assert get_log_levels_from_config(config) == {"console": logging.WARNING, "main_file": logging.INFO}


class TestGetLoggers:
    """Tests for get_loggers function."""

    def test_console_only(self, clean_loggers: None) -> None:
        """Without a log file, both loggers write to the shared console."""
        console_logger, error_logger, listener = get_loggers(AppConfig())

        assert listener is None
        assert console_logger.name == "console_logger"
        assert isinstance(console_logger.handlers[0], RichHandler)
        assert console_logger.handlers[0].console is get_shared_console()
        assert console_logger.handlers[0].markup is False
        assert error_logger.handlers == console_logger.handlers

    def test_file_logging(self, tmp_path: Path, clean_loggers: None) -> None:
        """With a log file, records are written through the queue listener."""
        config = AppConfig(logs_base_dir=str(tmp_path), logging=LoggingConfig(main_log_file="main/quality.log"))

        console_logger, error_logger, listener = get_loggers(config)
        assert isinstance(listener, SafeQueueListener)
        try:
            assert any(isinstance(h, QueueHandler) for h in error_logger.handlers)
            error_logger.error("Command %s failed", "key")
        finally:
            listener.stop()

        content = (tmp_path / "main" / "quality.log").read_text(encoding="utf-8")
        assert "E [error_logger] Command key failed" in content
        assert console_logger.name == "console_logger"

    def test_repeated_setup_replaces_queue_handler(self, tmp_path: Path, clean_loggers: None) -> None:
        """Setting up twice should not duplicate queue handlers."""
        config = AppConfig(logs_base_dir=str(tmp_path), logging=LoggingConfig(main_log_file="quality.log"))

        _, _, first = get_loggers(config)
        _, error_logger, second = get_loggers(config)
        assert first is not None
        assert second is not None
        first.stop()
        second.stop()

        assert sum(isinstance(h, QueueHandler) for h in error_logger.handlers) == 1

    def test_listener_stop_is_idempotent(self, tmp_path: Path, clean_loggers: None) -> None:
        """Stopping twice should not raise."""
        config = AppConfig(logs_base_dir=str(tmp_path), logging=LoggingConfig(main_log_file="quality.log"))
        _, _, listener = get_loggers(config)
        assert listener is not None

        listener.stop()
        listener.stop()

    def test_falls_back_on_failure(self, clean_loggers: None) -> None:
        """Setup failures should produce fallback loggers instead of raising."""
        with patch("core.logger.create_console_logger", side_effect=OSError("boom")):
            console_logger, error_logger, listener = get_loggers(AppConfig())

        assert listener is None
        assert console_logger.name == "console_fallback"
        assert error_logger.name == "error_fallback"

    def test_falls_back_when_log_directory_cannot_be_created(self, tmp_path: Path, clean_loggers: None) -> None:
        """A log directory blocked by a file should produce fallback loggers."""
        (tmp_path / "main").write_text("not a directory")
        config = AppConfig(logs_base_dir=str(tmp_path), logging=LoggingConfig(main_log_file="main/quality.log"))

        console_logger, error_logger, listener = get_loggers(config)

        assert listener is None
        assert console_logger.name == "console_fallback"
        assert error_logger.name == "error_fallback"


class TestCreateFallbackLoggers:
    """Tests for create_fallback_loggers function."""

    def test_reports_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Should report the setup failure on stderr."""
        create_fallback_loggers(ValueError("bad level"))
        assert "Failed to configure logging: bad level" in capsys.readouterr().err
