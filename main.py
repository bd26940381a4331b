#!/usr/bin/env python3
"""HLS Quality Fingerprint - Main entry point.

Inspects the transcode cache keys, scores and descriptions derived from
playback request URLs.
"""

import logging
import sys
from pathlib import Path

# Add src directory to Python path BEFORE imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from app.cli import CLI
from app.commands import run_command
from core.core_config import load_config
from core.exceptions import ConfigurationError
from core.logger import get_loggers
from services.quality.quality_service import QualityService

EXIT_CONFIG_ERROR = 2


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, set up logging and run the requested command.

    Returns:
        Process exit status

    """
    args = CLI().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    console_logger, error_logger, listener = get_loggers(config)
    if args.verbose:
        console_logger.setLevel(logging.DEBUG)
        for handler in console_logger.handlers:
            handler.setLevel(logging.DEBUG)

    try:
        service = QualityService(config.quality, console_logger)
        return run_command(args, service)
    except Exception:
        error_logger.exception("Command %s failed", args.command)
        raise
    finally:
        if listener is not None:
            listener.stop()


if __name__ == "__main__":
    sys.exit(main())
