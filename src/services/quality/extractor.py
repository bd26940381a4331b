"""Quality descriptor extraction from playback request URLs.

Parses the query component of an HLS playback URL and builds a sparse
``QualityDescriptor`` from the recognised parameters. Each attribute is looked
up under its accepted spellings in priority order (see
``QUERY_PARAMETER_SPELLINGS``); the first non-empty value wins.

Usage:
    extractor = QualityExtractor(logger)
    descriptor = extractor.extract(request_url)
"""

from __future__ import annotations

import logging
from typing import Any, cast
from urllib.parse import parse_qsl, urlsplit

from core.models.quality_models import QUERY_PARAMETER_SPELLINGS, QualityDescriptor


class QualityExtractionError(ValueError):
    """Raised when a request URL cannot be parsed."""

    def __init__(self, message: str, url: Any = None) -> None:
        """Initialize extraction error.

        Args:
            message: Error description
            url: The input that failed to parse (optional, for debugging)

        """
        super().__init__(message)
        self.url = url


def split_query(url: Any) -> str:
    """Return the raw query component of a URL, request path or bare query.

    Args:
        url: Absolute URL, request path with query, or ``a=b&c=d`` query string

    Returns:
        Query string without the leading ``?`` (empty when there is none)

    Raises:
        QualityExtractionError: If the input is not a string or not a parseable URL

    """
    if not isinstance(url, str):
        msg = f"URL must be a string, got {type(url).__name__}"
        raise QualityExtractionError(msg, url)

    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        msg = f"Malformed URL: {e}"
        raise QualityExtractionError(msg, url) from e

    # A "?" inside the fragment does not start a query
    if parts.query or "?" in url.partition("#")[0]:
        return parts.query
    # Bare query string such as "maxWidth=1920&maxHeight=1080"
    if not parts.scheme and not parts.netloc and "=" in parts.path:
        return parts.path
    return ""


def parse_query_parameters(query: str) -> dict[str, str]:
    """Decode a query string, keeping the first value of repeated names."""
    parameters: dict[str, str] = {}
    try:
        pairs = parse_qsl(query, keep_blank_values=True)
    except ValueError as e:
        msg = f"Malformed query string: {e}"
        raise QualityExtractionError(msg, query) from e

    for name, value in pairs:
        parameters.setdefault(name, value)
    return parameters


def build_descriptor(parameters: dict[str, str]) -> QualityDescriptor:
    """Build a sparse descriptor from decoded query parameters.

    Only attributes with a non-empty value under one of their accepted
    spellings are inserted.
    """
    descriptor: dict[str, str] = {}
    for attribute, spellings in QUERY_PARAMETER_SPELLINGS.items():
        value = next((parameters[name] for name in spellings if parameters.get(name)), None)
        if value is not None:
            descriptor[attribute.value] = value
    return cast(QualityDescriptor, descriptor)


class QualityExtractor:
    """Extracts quality descriptors from playback request URLs."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize quality extractor.

        Args:
            logger: Logger receiving extraction diagnostics (optional)

        """
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, url: Any) -> QualityDescriptor:
        """Extract the quality descriptor of a playback request.

        Never raises: malformed input yields an empty descriptor and a
        warning on the logger.

        Args:
            url: Request URL (or its query component)

        Returns:
            Sparse quality descriptor

        Example:
            extractor.extract("http://host/videos/1/master.m3u8?maxWidth=1920&DeviceId=abc")
            # Returns: {"maxWidth": "1920", "deviceId": "abc"}

        """
        try:
            parameters = parse_query_parameters(split_query(url))
        except QualityExtractionError as e:
            self.logger.warning("Error extracting quality from URL %r: %s", e.url, e)
            return QualityDescriptor()

        descriptor = build_descriptor(parameters)
        self.logger.debug("Extracted quality info: %s", descriptor)
        return descriptor
