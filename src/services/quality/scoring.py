"""Quality scoring for ranking candidate variants (higher = better)."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from operator import itemgetter
from typing import Any, TypeVar

from core.models.quality_models import QualityAttribute

T = TypeVar("T")
D = TypeVar("D", bound=Mapping[str, str])

# Leading decimal digits, as the upstream player parses integer parameters
_LEADING_INTEGER = re.compile(r"\s*\+?([0-9]+)")


def parse_quality_int(value: Any) -> int | None:
    """Parse a numeric quality value.

    Args:
        value: Raw attribute value (``"8000000"``, ``"720p"``, ...)

    Returns:
        Integer from the leading digits, None if the value has none

    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if not isinstance(value, str):
        return None
    if not (match := _LEADING_INTEGER.match(value)):
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # Digit run beyond the interpreter's int conversion limit
        return None


def scaled(value: int | None, divisor: int) -> float | None:
    """Divide a parsed value, None when missing or too large for a float."""
    if value is None:
        return None
    try:
        return value / divisor
    except OverflowError:
        return None


def attribute_int(descriptor: Mapping[str, str], attribute: QualityAttribute) -> int | None:
    """Parse one attribute of a descriptor, None when absent or non-numeric."""
    return parse_quality_int(descriptor.get(attribute.value))


def video_bitrate_kbps(descriptor: Mapping[str, str]) -> float | None:
    """Max video bitrate in kbps."""
    return scaled(attribute_int(descriptor, QualityAttribute.MAX_VIDEO_BITRATE), 1000)


def score(descriptor: Mapping[str, str]) -> float:
    """Compute the ranking score of a quality descriptor.

    score = maxVideoBitrate / 1000 + maxWidth * maxHeight / 1000 + audioBitrate / 10

    A term whose attributes are absent or non-numeric contributes 0; the
    other terms are unaffected.
    """
    width = attribute_int(descriptor, QualityAttribute.MAX_WIDTH)
    height = attribute_int(descriptor, QualityAttribute.MAX_HEIGHT)
    pixels = width * height if width is not None and height is not None else None

    terms = (
        video_bitrate_kbps(descriptor),
        scaled(pixels, 1000),
        scaled(attribute_int(descriptor, QualityAttribute.AUDIO_BITRATE), 10),
    )
    return sum((term for term in terms if term is not None), 0.0)


def rank_scored(items: Iterable[T], key: Callable[[T], Mapping[str, str]]) -> list[tuple[T, float]]:
    """Pair items with the score of their descriptor, best first.

    Each descriptor is scored once; ties keep their input order.

    Args:
        items: Candidates to order (descriptors, or records holding one)
        key: Returns the descriptor of a candidate

    Returns:
        List of (item, score) pairs

    """
    scored = [(item, score(key(item))) for item in items]
    return sorted(scored, key=itemgetter(1), reverse=True)


def rank(descriptors: Iterable[D]) -> list[D]:
    """Order descriptors best first; ties keep their input order."""
    return [descriptor for descriptor, _ in rank_scored(descriptors, key=lambda descriptor: descriptor)]


def best(descriptors: Iterable[D]) -> D | None:
    """Return the highest scoring descriptor, or None for no candidates."""
    ranked = rank(descriptors)
    return ranked[0] if ranked else None
