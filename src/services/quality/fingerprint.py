"""Quality fingerprinting for transcode cache keys.

A cache key identifies one reusable transcoded variant. It is derived from the
descriptor's quality-affecting attributes only; session attributes (media
source, device, play session) are dropped so that the same variant requested
from another device or session hits the same cache entry.

Core Concept:
- canonical form = compact JSON of the non-session attributes, sorted by name
- cache key = first 12 hex characters of MD5(canonical form)

The canonical form is byte-compatible with the keys already stored by the
proxy, so existing cache entries stay addressable. MD5 is not used for
security here.
"""

from __future__ import annotations

import hashlib
import json
import re
from collections.abc import Mapping
from typing import Any

from core.models.quality_models import SESSION_ATTRIBUTES, FingerprintSummary

ENCODING = "utf-8"
HASH_ALGORITHM = "md5"
CACHE_KEY_LENGTH = 12

_CACHE_KEY_PATTERN = re.compile(rf"[0-9a-f]{{{CACHE_KEY_LENGTH}}}")


def canonical_attributes(descriptor: Mapping[str, str]) -> dict[str, str]:
    """Return the non-session attributes of a descriptor, sorted by name."""
    return {name: descriptor[name] for name in sorted(descriptor) if name not in SESSION_ATTRIBUTES}


def canonicalize(descriptor: Mapping[str, str]) -> str:
    """Create the canonical text form hashed into the cache key.

    Args:
        descriptor: Quality descriptor

    Returns:
        Compact JSON object with sorted keys and session attributes removed

    """
    return json.dumps(
        canonical_attributes(descriptor),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def cache_key(descriptor: Mapping[str, str]) -> str:
    """Generate the cache key for a quality descriptor.

    Args:
        descriptor: Quality descriptor

    Returns:
        12-character lowercase hex string

    Example:
        cache_key({"maxWidth": "1920", "deviceId": "abc"}) == cache_key({"maxWidth": "1920"})

    """
    hash_object = hashlib.new(HASH_ALGORITHM, usedforsecurity=False)
    hash_object.update(canonicalize(descriptor).encode(ENCODING, "surrogatepass"))
    return hash_object.hexdigest()[:CACHE_KEY_LENGTH]


def equal(first: Mapping[str, str], second: Mapping[str, str]) -> bool:
    """Return True if both descriptors select the same transcoded variant."""
    return cache_key(first) == cache_key(second)


def is_valid_cache_key(value: Any) -> bool:
    """Validate that a value has the cache key format (12 lowercase hex characters)."""
    return isinstance(value, str) and _CACHE_KEY_PATTERN.fullmatch(value) is not None


def fingerprint_summary(descriptor: Mapping[str, str]) -> FingerprintSummary:
    """Get the cache key along with the data that produced it.

    Useful for debugging unexpected cache misses or hits.
    """
    used = canonical_attributes(descriptor)
    return FingerprintSummary(
        cache_key=cache_key(descriptor),
        canonical=canonicalize(descriptor),
        attributes_used=list(used),
        session_attributes_ignored=sorted(name for name in descriptor if name in SESSION_ATTRIBUTES),
    )
