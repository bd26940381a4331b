"""Pytest configuration and shared fixtures for HLS Quality Fingerprint.

This module configures the test environment by ensuring the project root and
the src directory are on sys.path, allowing imports of the src packages.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ensure project root and src are on sys.path for `import core`, `import services`
PROJECT_ROOT = Path(__file__).resolve().parents[1]
for path in (PROJECT_ROOT, PROJECT_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

SCENARIO_URL = (
    "http://jellyfin:8096/videos/5f1c/master.m3u8"
    "?maxVideoBitrate=8000000&maxWidth=1920&maxHeight=1080&videoCodec=h264"
    "&audioCodec=aac&audioLanguage=eng&audioStreamIndex=2&DeviceId=abc123"
)


@pytest.fixture
def mock_console_logger() -> MagicMock:
    """Mock console logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def mock_error_logger() -> MagicMock:
    """Mock error logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def scenario_url() -> str:
    """Playback URL of a 1080p H264 request with an English AAC track."""
    return SCENARIO_URL
