"""Quality Service for the transcode cache.

Single entry point used by the request path: extracts the quality descriptor
of a playback request and derives its cache key, score, description and
metrics. All operations are pure functions of their input; the service only
adds logging at its boundary, so one instance can be shared by any number of
request workers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from core.models.config_models import QualityConfig
from core.models.quality_models import FingerprintSummary, QualityDescriptor, QualityMetrics
from services.quality import fingerprint, formatter, scoring
from services.quality.extractor import QualityExtractor

T = TypeVar("T")


class QualityService:
    """Quality fingerprinting operations bound to a logger and configuration."""

    def __init__(self, config: QualityConfig | None = None, logger: logging.Logger | None = None) -> None:
        """Initialize the quality service.

        Args:
            config: Quality configuration (defaults apply when omitted)
            logger: Logger for extraction and fingerprint diagnostics (optional)

        """
        self.config = config or QualityConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.extractor = QualityExtractor(self.logger)

    def extract(self, url: Any) -> QualityDescriptor:
        """Extract quality parameters from a playback request URL."""
        return self.extractor.extract(url)

    def cache_key(self, descriptor: Mapping[str, str]) -> str:
        """Generate the cache key of a descriptor."""
        key = fingerprint.cache_key(descriptor)
        self.logger.debug("Generated quality hash: %s for %s", key, fingerprint.canonicalize(descriptor))
        return key

    def cache_key_for_url(self, url: Any) -> str:
        """Extract a request's descriptor and return its cache key."""
        return self.cache_key(self.extract(url))

    @staticmethod
    def equal(first: Mapping[str, str], second: Mapping[str, str]) -> bool:
        """Compare two descriptors by cache key."""
        return fingerprint.equal(first, second)

    @staticmethod
    def score(descriptor: Mapping[str, str]) -> float:
        """Get the ranking score of a descriptor (higher = better)."""
        return scoring.score(descriptor)

    @staticmethod
    def describe(descriptor: Mapping[str, str]) -> str:
        """Get a human-readable description of a descriptor."""
        return formatter.describe(descriptor)

    def metrics(self, descriptor: Mapping[str, str]) -> QualityMetrics:
        """Get quality metrics for analysis."""
        return formatter.metrics(descriptor, self.config.reference_duration_seconds)

    @staticmethod
    def rank(descriptors: Iterable[QualityDescriptor]) -> list[QualityDescriptor]:
        """Order descriptors best first."""
        return scoring.rank(descriptors)

    @staticmethod
    def rank_scored(items: Iterable[T], key: Callable[[T], Mapping[str, str]]) -> list[tuple[T, float]]:
        """Order arbitrary candidates best first by the score of their descriptor."""
        return scoring.rank_scored(items, key)

    def fingerprint_summary(self, descriptor: Mapping[str, str]) -> FingerprintSummary:
        """Get the cache key together with the attributes it was derived from."""
        summary = fingerprint.fingerprint_summary(descriptor)
        if summary.session_attributes_ignored:
            self.logger.debug(
                "Quality hash %s ignores session attributes: %s",
                summary.cache_key,
                ", ".join(summary.session_attributes_ignored),
            )
        return summary
