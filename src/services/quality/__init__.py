"""Quality fingerprinting for the transcode cache."""

from services.quality.extractor import QualityExtractionError, QualityExtractor
from services.quality.fingerprint import cache_key, canonicalize, equal, fingerprint_summary, is_valid_cache_key
from services.quality.formatter import UNKNOWN_QUALITY, describe, estimate_size, metrics
from services.quality.quality_service import QualityService
from services.quality.scoring import best, rank, rank_scored, score

__all__ = [
    "UNKNOWN_QUALITY",
    "QualityExtractionError",
    "QualityExtractor",
    "QualityService",
    "best",
    "cache_key",
    "canonicalize",
    "describe",
    "equal",
    "estimate_size",
    "fingerprint_summary",
    "is_valid_cache_key",
    "metrics",
    "rank",
    "rank_scored",
    "score",
]
