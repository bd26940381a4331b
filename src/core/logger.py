"""Logging setup using RichHandler for console output and QueueHandler for non-blocking file IO.

Features:

1.  **Rich Console Output:** ``rich.logging.RichHandler`` on one shared console.
2.  **Non-Blocking File Logging:** ``QueueHandler`` and ``QueueListener`` keep file
    I/O off the request path when a log file is configured.
3.  **Compact Formatting:** ``CompactFormatter`` abbreviates level names in file logs.
4.  **Configuration Driven:** levels and paths come from ``AppConfig.logging``.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Golden Rule of Logging
# ---------------------------------------------------------------------------
# All runtime and debugging information **must** go through a configured
# ``logging.Logger`` instance.  ``print()`` is reserved for the final
# end-user result of a command.
# ---------------------------------------------------------------------------
import logging
import queue
import sys
import traceback
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from core.models.config_models import AppConfig

__all__ = [
    "LEVEL_ABBREV",
    "CompactFormatter",
    "LoggerFilter",
    "SafeQueueListener",
    "create_console_logger",
    "create_fallback_loggers",
    "ensure_directory",
    "get_full_log_path",
    "get_log_levels_from_config",
    "get_loggers",
    "get_shared_console",
    "setup_queue_logging",
]

# Module-level shared console container (avoids global statement)
_console_holder: dict[str, Console] = {}

LEVEL_ABBREV = {
    "DEBUG": "D",
    "INFO": "I",
    "WARNING": "W",
    "ERROR": "E",
    "CRITICAL": "C",
}

LOG_LEVELS: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
    "NOTSET": logging.NOTSET,
}


def get_shared_console() -> Console:
    """Get or create the shared Rich console instance.

    Returns:
        The shared Console instance (writes to stderr so stdout stays clean).

    """
    if "console" not in _console_holder:
        _console_holder["console"] = Console(stderr=True)
    return _console_holder["console"]


class SafeQueueListener(QueueListener):
    """A QueueListener wrapper that safely handles stop() calls."""

    def stop(self) -> None:
        """Stop the listener thread, ignoring an already stopped listener."""
        if getattr(self, "_thread", None) is not None:
            super().stop()


class LoggerFilter:
    """Filter that only allows records from specific logger names."""

    def __init__(self, allowed_loggers: list[str]) -> None:
        """Initialize filter with allowed logger names.

        Args:
            allowed_loggers: Logger names that pass the filter; their child
                loggers pass as well.

        """
        self.allowed_loggers = set(allowed_loggers)

    def filter(self, record: logging.LogRecord) -> bool:
        """Return True if the record comes from an allowed logger or one of its children."""
        return any(record.name == name or record.name.startswith(f"{name}.") for name in self.allowed_loggers)


class CompactFormatter(logging.Formatter):
    """Log formatter with abbreviated level names, used for file logs."""

    def __init__(self, fmt: str | None = None, datefmt: str = "%H:%M:%S") -> None:
        """Initialize the CompactFormatter."""
        super().__init__(fmt or "%(asctime)s %(levelname)s [%(name)s] %(message)s", datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with a one-letter level name."""
        original_levelname = record.levelname
        record.levelname = LEVEL_ABBREV.get(original_levelname, original_levelname[:1])
        try:
            return super().format(record)
        finally:
            # Other handlers may format the same record
            record.levelname = original_levelname


def ensure_directory(path: str | Path) -> None:
    """Ensure that the given directory path exists, creating it if necessary.

    Raises:
        OSError: If the directory cannot be created; get_loggers() falls back
            to stream loggers in that case.

    """
    if path:
        Path(path).mkdir(parents=True, exist_ok=True)


def get_full_log_path(config: AppConfig) -> Path | None:
    """Get the main log file path, or None when file logging is disabled."""
    log_file = config.logging.main_log_file
    if not log_file:
        return None
    path = Path(log_file).expanduser()
    return path if path.is_absolute() else Path(config.logs_base_dir).expanduser() / path


def get_log_levels_from_config(config: AppConfig) -> dict[str, int]:
    """Convert the ``logging.levels`` section to ``logging`` constants.

    Returns:
        Dictionary with ``"console"`` and ``"main_file"`` levels.

    """
    levels_config = config.logging.levels
    return {
        "console": LOG_LEVELS.get(str(levels_config.console).upper(), logging.INFO),
        "main_file": LOG_LEVELS.get(str(levels_config.main_file).upper(), logging.DEBUG),
    }


def create_console_logger(levels: dict[str, int]) -> logging.Logger:
    """Create and configure the console logger with RichHandler.

    Only adds a handler if the logger has none yet.
    """
    console_logger = logging.getLogger("console_logger")
    if not console_logger.handlers:
        ch = RichHandler(
            level=levels["console"],
            console=get_shared_console(),
            show_path=False,
            enable_link_path=False,
            log_time_format="%H:%M:%S",
            markup=False,
        )
        console_logger.addHandler(ch)
        console_logger.setLevel(levels["console"])
        console_logger.propagate = False
    return console_logger


def setup_queue_logging(levels: dict[str, int], log_file: Path) -> tuple[logging.Logger, SafeQueueListener]:
    """Set up queue-based file logging for the error and config loggers."""
    ensure_directory(log_file.parent)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(CompactFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    file_handler.setLevel(levels["main_file"])
    file_handler.addFilter(LoggerFilter(["error_logger", "config", "console_logger"]))

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    listener = SafeQueueListener(log_queue, file_handler, respect_handler_level=True)
    listener.start()

    queue_handler = QueueHandler(log_queue)
    for name in ("error_logger", "config", "console_logger"):
        logger = logging.getLogger(name)
        for stale in [h for h in logger.handlers if isinstance(h, QueueHandler)]:
            logger.removeHandler(stale)
        logger.addHandler(queue_handler)
        logger.setLevel(min(logger.level or levels["main_file"], levels["main_file"]))
        logger.propagate = False

    return logging.getLogger("error_logger"), listener


def get_loggers(config: AppConfig) -> tuple[logging.Logger, logging.Logger, SafeQueueListener | None]:
    """Create and return the console and error loggers.

    Note:
        This function never raises exceptions. On setup failure, it returns
        fallback loggers with basic StreamHandler configuration.

    Returns:
        Tuple of (console_logger, error_logger, listener). Listener is ``None``
        when file logging is disabled or setup failed.

    """
    try:
        levels = get_log_levels_from_config(config)
        console_logger = create_console_logger(levels)

        if (log_file := get_full_log_path(config)) is None:
            error_logger = logging.getLogger("error_logger")
            if not error_logger.handlers:
                error_logger.addHandler(console_logger.handlers[0])
                error_logger.setLevel(levels["console"])
                error_logger.propagate = False
            return console_logger, error_logger, None

        error_logger, listener = setup_queue_logging(levels, log_file)
    except (OSError, ValueError, AttributeError, TypeError, IndexError) as e:
        return create_fallback_loggers(e)

    console_logger.debug("Logging setup with QueueListener and RichHandler complete.")
    return console_logger, error_logger, listener


def create_fallback_loggers(e: Exception) -> tuple[logging.Logger, logging.Logger, None]:
    """Create basic stream loggers when the main logger setup fails."""
    print(f"ERROR: Failed to configure logging: {e}", file=sys.stderr)
    traceback.print_exc(file=sys.stderr)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    console_fallback = logging.getLogger("console_fallback")
    error_fallback = logging.getLogger("error_fallback")
    if not console_fallback.handlers:
        console_fallback.addHandler(logging.StreamHandler(sys.stderr))
    if not error_fallback.handlers:
        error_fallback.addHandler(logging.StreamHandler(sys.stderr))

    return console_fallback, error_fallback, None
