"""Command-line interface for inspecting quality fingerprints."""

import argparse
from typing import Any


def _add_url_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("url", help="Playback request URL (quote it in the shell)")


def _add_extract_command(subparsers: Any) -> None:
    """Add extract command."""
    parser = subparsers.add_parser(
        "extract",
        help="Show the quality descriptor of a request URL",
        description="Print the quality parameters recognised in a playback request URL as JSON",
    )
    _add_url_argument(parser)


def _add_key_command(subparsers: Any) -> None:
    """Add key command."""
    parser = subparsers.add_parser(
        "key",
        aliases=["hash"],
        help="Show the cache key of a request URL",
        description="Print the cache key derived from a request URL's quality parameters",
    )
    _add_url_argument(parser)
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Also print the canonical form and the session parameters that were ignored",
    )


def _add_compare_command(subparsers: Any) -> None:
    """Add compare command."""
    parser = subparsers.add_parser(
        "compare",
        help="Check whether two request URLs share a cache entry",
        description="Compare the cache keys of two request URLs (exit status 0 if equal, 1 otherwise)",
    )
    parser.add_argument("first_url", help="First playback request URL")
    parser.add_argument("second_url", help="Second playback request URL")


def _add_describe_command(subparsers: Any) -> None:
    """Add describe command."""
    parser = subparsers.add_parser(
        "describe",
        aliases=["metrics"],
        help="Show score, description and estimated size of a request URL",
        description="Print quality metrics for a request URL as JSON",
    )
    _add_url_argument(parser)


def _add_rank_command(subparsers: Any) -> None:
    """Add rank command."""
    parser = subparsers.add_parser(
        "rank",
        help="Order request URLs from best to worst quality",
        description="Rank request URLs by quality score, best first",
    )
    parser.add_argument("urls", nargs="+", help="Playback request URLs")


class CLI:
    """Command-line interface handler."""

    def __init__(self) -> None:
        """Initialize CLI parser."""
        self.parser = self._create_parser()

    @staticmethod
    def _create_parser() -> argparse.ArgumentParser:
        """Create the argument parser.

        Returns:
            Configured ArgumentParser

        """
        parser = argparse.ArgumentParser(
            prog="python main.py",
            description="HLS Quality Fingerprint - Inspect transcode cache keys derived from playback URLs",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
    # Show the cache key of a request
    %(prog)s key "http://jellyfin/videos/1/master.m3u8?maxWidth=1920&DeviceId=abc"

    # Check whether two requests reuse the same transcode
    %(prog)s compare "$URL_FROM_TV" "$URL_FROM_PHONE"

    # Rank candidate qualities
    %(prog)s rank "$URL_1080P" "$URL_720P"
            """,
        )

        parser.add_argument(
            "--config",
            default=None,
            help="Path to a YAML configuration file (defaults apply when omitted)",
        )
        parser.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Log debug details (extracted parameters, canonical forms) to the console",
        )

        subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")
        _add_extract_command(subparsers)
        _add_key_command(subparsers)
        _add_compare_command(subparsers)
        _add_describe_command(subparsers)
        _add_rank_command(subparsers)

        return parser

    def parse_args(self, args: list[str] | None = None) -> argparse.Namespace:
        """Parse command line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace

        """
        return self.parser.parse_args(args)
