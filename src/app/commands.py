"""Execution of the inspection commands."""

from __future__ import annotations

import argparse
import json
from collections.abc import Callable
from operator import itemgetter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from services.quality.quality_service import QualityService

EXIT_OK = 0
EXIT_NOT_EQUAL = 1


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_extract(args: argparse.Namespace, service: QualityService) -> int:
    """Print the descriptor extracted from a URL."""
    _print_json(service.extract(args.url))
    return EXIT_OK


def run_key(args: argparse.Namespace, service: QualityService) -> int:
    """Print the cache key of a URL."""
    descriptor = service.extract(args.url)
    if not args.explain:
        print(service.cache_key(descriptor))
        return EXIT_OK
    _print_json(service.fingerprint_summary(descriptor).model_dump())
    return EXIT_OK


def run_compare(args: argparse.Namespace, service: QualityService) -> int:
    """Print both cache keys and whether they match."""
    first = service.extract(args.first_url)
    second = service.extract(args.second_url)
    equal = service.equal(first, second)
    _print_json(
        {
            "first": service.cache_key(first),
            "second": service.cache_key(second),
            "equal": equal,
        }
    )
    return EXIT_OK if equal else EXIT_NOT_EQUAL


def run_describe(args: argparse.Namespace, service: QualityService) -> int:
    """Print the quality metrics of a URL."""
    _print_json(service.metrics(service.extract(args.url)).model_dump(by_alias=True))
    return EXIT_OK


def run_rank(args: argparse.Namespace, service: QualityService) -> int:
    """Print URLs ordered best first."""
    candidates = [(url, service.extract(url)) for url in args.urls]
    ranked = service.rank_scored(candidates, key=itemgetter(1))
    _print_json(
        [
            {
                "url": url,
                "score": value,
                "description": service.describe(descriptor),
                "cache_key": service.cache_key(descriptor),
            }
            for (url, descriptor), value in ranked
        ]
    )
    return EXIT_OK


COMMANDS: dict[str, Callable[[argparse.Namespace, QualityService], int]] = {
    "extract": run_extract,
    "key": run_key,
    "hash": run_key,
    "compare": run_compare,
    "describe": run_describe,
    "metrics": run_describe,
    "rank": run_rank,
}


def run_command(args: argparse.Namespace, service: QualityService) -> int:
    """Dispatch a parsed command.

    Returns:
        Process exit status

    """
    return COMMANDS[args.command](args, service)
