"""Human-readable quality summaries and size estimates."""

from __future__ import annotations

import math
from collections.abc import Mapping

from core.models.quality_models import QualityAttribute, QualityMetrics
from services.quality.scoring import attribute_int, scaled, score, video_bitrate_kbps

UNKNOWN_QUALITY = "Unknown Quality"

# Two hours; a coarse sizing assumption, not a measurement
DEFAULT_REFERENCE_DURATION_SECONDS = 7200


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _track_suffix(language: str | None, index: str | None) -> str:
    suffix = f" ({language})" if language else ""
    if index:
        suffix += f" [Track {index}]"
    return suffix


def describe(descriptor: Mapping[str, str]) -> str:
    """Get a human-readable quality description.

    Example:
        describe({"maxWidth": "1920", "maxHeight": "1080", "maxVideoBitrate": "8000000"})
        # Returns: "1920x1080 8Mbps"

    """
    get = descriptor.get
    parts: list[str] = []

    width = get(QualityAttribute.MAX_WIDTH.value)
    height = get(QualityAttribute.MAX_HEIGHT.value)
    if width and height:
        parts.append(f"{width}x{height}")

    if get(QualityAttribute.MAX_VIDEO_BITRATE.value):
        mbps = scaled(attribute_int(descriptor, QualityAttribute.MAX_VIDEO_BITRATE), 1_000_000)
        if mbps is not None:
            parts.append(f"{_round_half_up(mbps)}Mbps")

    if video_codec := get(QualityAttribute.VIDEO_CODEC.value):
        parts.append(video_codec.upper())

    if audio_codec := get(QualityAttribute.AUDIO_CODEC.value):
        parts.append(
            audio_codec.upper()
            + _track_suffix(get(QualityAttribute.AUDIO_LANGUAGE.value), get(QualityAttribute.AUDIO_STREAM_INDEX.value))
        )

    subtitle_language = get(QualityAttribute.SUBTITLE_LANGUAGE.value)
    subtitle_index = get(QualityAttribute.SUBTITLE_STREAM_INDEX.value)
    if subtitle_language or subtitle_index:
        parts.append("Subs" + _track_suffix(subtitle_language, subtitle_index))

    return " ".join(parts) if parts else UNKNOWN_QUALITY


def estimate_size(
    descriptor: Mapping[str, str],
    reference_duration_seconds: int = DEFAULT_REFERENCE_DURATION_SECONDS,
) -> float:
    """Estimate the output size in bytes for the reference duration.

    Returns 0 when the video bitrate is absent or non-numeric.
    """
    bitrate_kbps = video_bitrate_kbps(descriptor)
    if bitrate_kbps is None:
        return 0.0
    return bitrate_kbps * reference_duration_seconds * 1000 / 8


def metrics(
    descriptor: Mapping[str, str],
    reference_duration_seconds: int = DEFAULT_REFERENCE_DURATION_SECONDS,
) -> QualityMetrics:
    """Get score, description and estimated size of a descriptor."""
    return QualityMetrics(
        score=score(descriptor),
        description=describe(descriptor),
        estimated_size=estimate_size(descriptor, reference_duration_seconds),
    )
