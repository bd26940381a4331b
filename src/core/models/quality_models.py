"""Quality descriptor vocabulary and derived value models.

The descriptor keys are lower-camel names because the canonical form of a
descriptor (and therefore the cache key) is built from them.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, TypedDict

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from collections.abc import Mapping


class QualityAttribute(StrEnum):
    """Attributes recognised in a playback request."""

    # Video
    MAX_VIDEO_BITRATE = "maxVideoBitrate"
    VIDEO_CODEC = "videoCodec"
    MAX_WIDTH = "maxWidth"
    MAX_HEIGHT = "maxHeight"
    VIDEO_LEVEL = "videoLevel"
    PROFILE = "profile"
    MAX_FRAMERATE = "maxFramerate"
    VIDEO_BIT_DEPTH = "videoBitDepth"

    # Audio
    AUDIO_CODEC = "audioCodec"
    AUDIO_CHANNELS = "audioChannels"
    AUDIO_BITRATE = "audioBitrate"
    AUDIO_SAMPLE_RATE = "audioSampleRate"

    # Container
    CONTAINER = "container"
    SEGMENT_CONTAINER = "segmentContainer"

    # Subtitle
    SUBTITLE_CODEC = "subtitleCodec"

    # Stream selection
    AUDIO_STREAM_INDEX = "audioStreamIndex"
    SUBTITLE_STREAM_INDEX = "subtitleStreamIndex"
    AUDIO_LANGUAGE = "audioLanguage"
    SUBTITLE_LANGUAGE = "subtitleLanguage"
    MAX_AUDIO_CHANNELS = "maxAudioChannels"
    TRANSCODING_MAX_AUDIO_CHANNELS = "transcodingMaxAudioChannels"
    SUBTITLE_METHOD = "subtitleMethod"
    START_TIME_TICKS = "startTimeTicks"

    # Session
    MEDIA_SOURCE_ID = "mediaSourceId"
    DEVICE_ID = "deviceId"
    PLAY_SESSION_ID = "playSessionId"


class AttributeGroup(StrEnum):
    """Attribute group enumeration."""

    VIDEO = "video"
    AUDIO = "audio"
    CONTAINER = "container"
    SUBTITLE = "subtitle"
    STREAM_SELECTION = "stream_selection"
    SESSION = "session"


_A = QualityAttribute

ATTRIBUTE_GROUPS: Mapping[QualityAttribute, AttributeGroup] = MappingProxyType(
    {
        _A.MAX_VIDEO_BITRATE: AttributeGroup.VIDEO,
        _A.VIDEO_CODEC: AttributeGroup.VIDEO,
        _A.MAX_WIDTH: AttributeGroup.VIDEO,
        _A.MAX_HEIGHT: AttributeGroup.VIDEO,
        _A.VIDEO_LEVEL: AttributeGroup.VIDEO,
        _A.PROFILE: AttributeGroup.VIDEO,
        _A.MAX_FRAMERATE: AttributeGroup.VIDEO,
        _A.VIDEO_BIT_DEPTH: AttributeGroup.VIDEO,
        _A.AUDIO_CODEC: AttributeGroup.AUDIO,
        _A.AUDIO_CHANNELS: AttributeGroup.AUDIO,
        _A.AUDIO_BITRATE: AttributeGroup.AUDIO,
        _A.AUDIO_SAMPLE_RATE: AttributeGroup.AUDIO,
        _A.CONTAINER: AttributeGroup.CONTAINER,
        _A.SEGMENT_CONTAINER: AttributeGroup.CONTAINER,
        _A.SUBTITLE_CODEC: AttributeGroup.SUBTITLE,
        _A.AUDIO_STREAM_INDEX: AttributeGroup.STREAM_SELECTION,
        _A.SUBTITLE_STREAM_INDEX: AttributeGroup.STREAM_SELECTION,
        _A.AUDIO_LANGUAGE: AttributeGroup.STREAM_SELECTION,
        _A.SUBTITLE_LANGUAGE: AttributeGroup.STREAM_SELECTION,
        _A.MAX_AUDIO_CHANNELS: AttributeGroup.STREAM_SELECTION,
        _A.TRANSCODING_MAX_AUDIO_CHANNELS: AttributeGroup.STREAM_SELECTION,
        _A.SUBTITLE_METHOD: AttributeGroup.STREAM_SELECTION,
        _A.START_TIME_TICKS: AttributeGroup.STREAM_SELECTION,
        _A.MEDIA_SOURCE_ID: AttributeGroup.SESSION,
        _A.DEVICE_ID: AttributeGroup.SESSION,
        _A.PLAY_SESSION_ID: AttributeGroup.SESSION,
    }
)

# Tied to one playback session; never part of the cache key
SESSION_ATTRIBUTES: frozenset[str] = frozenset(
    attribute.value for attribute, group in ATTRIBUTE_GROUPS.items() if group is AttributeGroup.SESSION
)

# Accepted query-parameter names per attribute, in lookup priority order.
# The upstream player only sends lower-camel names for stream selection and
# capitalized names for session identifiers.
QUERY_PARAMETER_SPELLINGS: Mapping[QualityAttribute, tuple[str, ...]] = MappingProxyType(
    {
        _A.MAX_VIDEO_BITRATE: ("maxVideoBitrate", "MaxVideoBitrate"),
        _A.VIDEO_CODEC: ("videoCodec", "VideoCodec"),
        _A.MAX_WIDTH: ("maxWidth", "MaxWidth"),
        _A.MAX_HEIGHT: ("maxHeight", "MaxHeight"),
        _A.VIDEO_LEVEL: ("videoLevel", "VideoLevel"),
        _A.PROFILE: ("profile", "Profile"),
        _A.MAX_FRAMERATE: ("maxFramerate", "MaxFramerate"),
        _A.VIDEO_BIT_DEPTH: ("videoBitDepth", "VideoBitDepth"),
        _A.AUDIO_CODEC: ("audioCodec", "AudioCodec"),
        _A.AUDIO_CHANNELS: ("audioChannels", "AudioChannels"),
        _A.AUDIO_BITRATE: ("audioBitrate", "AudioBitrate"),
        _A.AUDIO_SAMPLE_RATE: ("audioSampleRate", "AudioSampleRate"),
        _A.CONTAINER: ("container", "Container"),
        _A.SEGMENT_CONTAINER: ("segmentContainer", "SegmentContainer"),
        _A.SUBTITLE_CODEC: ("subtitleCodec", "SubtitleCodec"),
        _A.AUDIO_STREAM_INDEX: ("audioStreamIndex",),
        _A.SUBTITLE_STREAM_INDEX: ("subtitleStreamIndex",),
        _A.AUDIO_LANGUAGE: ("audioLanguage",),
        _A.SUBTITLE_LANGUAGE: ("subtitleLanguage",),
        _A.MAX_AUDIO_CHANNELS: ("maxAudioChannels",),
        _A.TRANSCODING_MAX_AUDIO_CHANNELS: ("transcodingMaxAudioChannels",),
        _A.SUBTITLE_METHOD: ("subtitleMethod",),
        _A.START_TIME_TICKS: ("startTimeTicks",),
        _A.MEDIA_SOURCE_ID: ("MediaSourceId",),
        _A.DEVICE_ID: ("DeviceId",),
        _A.PLAY_SESSION_ID: ("PlaySessionId",),
    }
)

del _A


class QualityDescriptor(TypedDict, total=False):
    """Sparse set of request parameters that select one transcoded variant.

    A key is present only when the request carried a non-empty value for it.
    """

    maxVideoBitrate: str
    videoCodec: str
    maxWidth: str
    maxHeight: str
    videoLevel: str
    profile: str
    maxFramerate: str
    videoBitDepth: str
    audioCodec: str
    audioChannels: str
    audioBitrate: str
    audioSampleRate: str
    container: str
    segmentContainer: str
    subtitleCodec: str
    audioStreamIndex: str
    subtitleStreamIndex: str
    audioLanguage: str
    subtitleLanguage: str
    maxAudioChannels: str
    transcodingMaxAudioChannels: str
    subtitleMethod: str
    startTimeTicks: str
    mediaSourceId: str
    deviceId: str
    playSessionId: str


class QualityMetrics(BaseModel):
    """Score, description and size estimate derived from a descriptor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    score: float = Field(ge=0)
    description: str
    estimated_size: float = Field(ge=0, alias="estimatedSize")


class FingerprintSummary(BaseModel):
    """Cache key together with the data it was derived from."""

    model_config = ConfigDict(frozen=True)

    cache_key: str
    canonical: str
    attributes_used: list[str]
    session_attributes_ignored: list[str]
