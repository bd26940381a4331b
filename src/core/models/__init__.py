"""Data models."""

from core.models.config_models import AppConfig, LoggingConfig, LogLevel, QualityConfig
from core.models.quality_models import (
    QUERY_PARAMETER_SPELLINGS,
    SESSION_ATTRIBUTES,
    AttributeGroup,
    FingerprintSummary,
    QualityAttribute,
    QualityDescriptor,
    QualityMetrics,
)

__all__ = [
    "QUERY_PARAMETER_SPELLINGS",
    "SESSION_ATTRIBUTES",
    "AppConfig",
    "AttributeGroup",
    "FingerprintSummary",
    "LogLevel",
    "LoggingConfig",
    "QualityAttribute",
    "QualityConfig",
    "QualityDescriptor",
    "QualityMetrics",
]
