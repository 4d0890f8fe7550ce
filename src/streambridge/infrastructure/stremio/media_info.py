"""Technical profile extraction for media sources.

Turns the raw track metadata a media server reports into display tags
(resolution, codecs, HDR, audio layout) and a multi-line description.
Pure transformation logic with no I/O and no framework dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

import structlog

from streambridge.domain.entities.media import (
    MediaSource,
    MediaStream,
    StreamType,
    TechnicalProfile,
)

log = structlog.get_logger(__name__)

UNKNOWN_QUALITY = "Unknown"
DESCRIPTION_FALLBACK = "Stream Available"

_RESOLUTION_TOKEN_RE = re.compile(
    r"\b(4k|2160p|1440p|1080p|720p|576p|480p|sd)\b", re.IGNORECASE
)

_RESOLUTION_TOKENS: Mapping[str, str] = MappingProxyType(
    {
        "4K": "4K",
        "2160P": "4K",
        "1440P": "1440p",
        "1080P": "1080p",
        "720P": "720p",
        "576P": "576p",
        "480P": "480p",
        "SD": "SD",
    }
)

# (min height, label), checked top to bottom
_HEIGHT_LADDER: tuple[tuple[int, str], ...] = (
    (1440, "1440p"),
    (1080, "1080p"),
    (720, "720p"),
    (576, "576p"),
    (480, "480p"),
)

VIDEO_CODECS: Mapping[str, str] = MappingProxyType(
    {
        "H264": "H.264",
        "H265": "HEVC",
        "HEVC": "HEVC",
        "VP8": "VP8",
        "VP9": "VP9",
        "AV1": "AV1",
        "MPEG2VIDEO": "MPEG-2",
        "VC1": "VC-1",
    }
)

_TEN_BIT_PROFILES = ("Main10", "High10", "Main 10")

EXTENDED_HDR_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "Hdr10": "HDR10",
        "Hdr10Plus": "HDR10+",
        "HyperLogGamma": "HLG",
        "DolbyVision": "DV",
    }
)

COLOR_TRANSFER_HDR: Mapping[str, str] = MappingProxyType(
    {
        "smpte2084": "HDR10",
        "arib-std-b67": "HLG",
    }
)

AUDIO_CODECS: Mapping[str, str] = MappingProxyType(
    {
        "AAC": "AAC",
        "AC3": "DD",
        "EAC3": "DD+",
        "DTS": "DTS",
        "DTSHD": "DTS-HD",
        "TRUEHD": "TrueHD",
        "FLAC": "FLAC",
        "OPUS": "Opus",
        "MP3": "MP3",
        "VORBIS": "Vorbis",
        "PCM": "PCM",
    }
)

CHANNEL_LAYOUTS: Mapping[int, str] = MappingProxyType(
    {1: "Mono", 2: "2.0", 6: "5.1", 8: "7.1"}
)

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


# ---------------------------------------------------------------------------
# Track selection
# ---------------------------------------------------------------------------


def select_video_stream(source: MediaSource) -> MediaStream | None:
    """First video track, if any."""
    return next(
        (s for s in source.media_streams or [] if s.type == StreamType.VIDEO.value),
        None,
    )


def select_audio_stream(source: MediaSource) -> MediaStream | None:
    """Default audio track, falling back to the first audio track."""
    audio = [s for s in source.media_streams or [] if s.type == StreamType.AUDIO.value]
    return next((s for s in audio if s.is_default), audio[0] if audio else None)


def select_subtitle_streams(source: MediaSource) -> list[MediaStream]:
    return [
        s for s in source.media_streams or [] if s.type == StreamType.SUBTITLE.value
    ]


# ---------------------------------------------------------------------------
# Individual tags
# ---------------------------------------------------------------------------


def quality_tag(video: MediaStream | None) -> str:
    """Resolution label, preferring a token in the display title.

    Falls back to the dimensions: width decides 4K variants (handles
    ultrawide and DCI aspect ratios), height decides everything below.
    """
    if video is None:
        return UNKNOWN_QUALITY

    m = _RESOLUTION_TOKEN_RE.search(video.display_title or "")
    if m:
        return _RESOLUTION_TOKENS[m.group(1).upper()]

    width = video.width or 0
    height = video.height or 0
    if not width and not height:
        return UNKNOWN_QUALITY

    if width >= 4096:
        return "4K DCI"
    if width >= 3840 or height >= 2160:
        return "4K"
    for min_height, label in _HEIGHT_LADDER:
        if height >= min_height:
            return label
    return "SD"


def resolution_dimensions(video: MediaStream | None) -> str | None:
    if video is None or not video.width or not video.height:
        return None
    return f"{video.width}x{video.height}"


def video_tag(video: MediaStream | None) -> str:
    """Codec display name, suffixed with ``10bit`` for 10-bit profiles."""
    if video is None:
        return ""
    codec = (video.codec or "").upper()
    display = VIDEO_CODECS.get(codec, codec)
    profile = video.profile or ""
    if any(marker in profile for marker in _TEN_BIT_PROFILES):
        return f"{display} 10bit"
    return display


def hdr_tag(video: MediaStream | None) -> str | None:
    """HDR format from ExtendedVideoType, then ColorTransfer, then IsHDR."""
    if video is None:
        return None
    if video.extended_video_type in EXTENDED_HDR_TYPES:
        return EXTENDED_HDR_TYPES[video.extended_video_type]
    if video.color_transfer in COLOR_TRANSFER_HDR:
        return COLOR_TRANSFER_HDR[video.color_transfer]
    if video.is_hdr:
        return "HDR"
    return None


def channel_label(channels: int | None) -> str:
    if not channels:
        return ""
    return CHANNEL_LAYOUTS.get(channels, f"{channels}ch")


def audio_tag(audio: MediaStream | None) -> str:
    """Audio codec abbreviation plus channel layout, e.g. ``DD+ 5.1``."""
    if audio is None:
        return ""
    codec = (audio.codec or "").upper()
    display = AUDIO_CODECS.get(codec, codec) or "Unknown"
    layout = channel_label(audio.channels)
    return f"{display} {layout}" if layout else display


def container_tag(container: str | None) -> str:
    return container.upper() if container else ""


def is_remux(source: MediaSource) -> bool:
    """Name-based remux detection: "remux" in the file path or source name."""
    path = (source.path or "").lower()
    name = (source.name or "").lower()
    return "remux" in path or "remux" in name


def format_bitrate(bps: int | None) -> str | None:
    if not bps:
        return None
    return f"{bps / 1_000_000:.1f}Mbps"


def format_file_size(size_bytes: int | None) -> str | None:
    """Human-readable size, one decimal for GB and TB only."""
    if not size_bytes:
        return None
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    decimals = 1 if unit >= 3 else 0
    return f"{size:.{decimals}f}{_SIZE_UNITS[unit]}"


def source_filename(source: MediaSource | None) -> str | None:
    """Basename of the source path (either separator), else the source name."""
    if source is None:
        return None
    if source.path:
        base = re.split(r"[\\/]", source.path)[-1]
        if base:
            return base
    return source.name


# ---------------------------------------------------------------------------
# Profile + description
# ---------------------------------------------------------------------------


def fallback_profile(source: MediaSource | None) -> TechnicalProfile:
    """Minimal profile built only from source-level fields."""
    container = source.container if source is not None else None
    return TechnicalProfile(
        container=container.upper() if container else "Unknown",
        filename=source_filename(source) or "stream",
        supports_direct_play=bool(source and source.supports_direct_play),
    )


def extract_technical_profile(source: MediaSource) -> TechnicalProfile:
    """Derive the TechnicalProfile for *source*. Never raises."""
    try:
        video = select_video_stream(source)
        audio = select_audio_stream(source)
        return TechnicalProfile(
            quality_tag=quality_tag(video),
            resolution_dimensions=resolution_dimensions(video),
            video_tag=video_tag(video),
            video_codec=video.codec if video else None,
            hdr_tag=hdr_tag(video),
            audio_tag=audio_tag(audio),
            audio_codec=audio.codec if audio else None,
            container=container_tag(source.container),
            is_remux=is_remux(source),
            bitrate=source.bitrate,
            bitrate_formatted=format_bitrate(source.bitrate),
            size=source.size,
            size_formatted=format_file_size(source.size),
            filename=source_filename(source) or "stream",
            supports_direct_play=source.supports_direct_play,
            supports_direct_stream=source.supports_direct_stream,
        )
    except Exception:  # noqa: BLE001
        log.warning(
            "media_info_extraction_failed",
            media_source_id=getattr(source, "id", None),
            exc_info=True,
        )
        return fallback_profile(source)


def build_description(profile: TechnicalProfile) -> str:
    """Multi-line stream description.

    Line order: resolution, HDR + codec, REMUX, audio, container +
    bitrate + size. Empty lines are dropped.
    """
    resolution = [
        p
        for p in (
            profile.quality_tag if profile.quality_tag != UNKNOWN_QUALITY else None,
            profile.resolution_dimensions,
        )
        if p
    ]
    video = [p for p in (profile.hdr_tag, profile.video_tag) if p]
    file_info = [
        p
        for p in (profile.container, profile.bitrate_formatted, profile.size_formatted)
        if p
    ]

    lines = [
        " • ".join(resolution),
        " • ".join(video),
        "REMUX" if profile.is_remux else "",
        profile.audio_tag,
        " • ".join(file_info),
    ]
    return "\n".join(line for line in lines if line) or DESCRIPTION_FALLBACK


def build_quality_title(source: MediaSource, video: MediaStream | None) -> str:
    """Short one-line label kept for clients that ignore the description."""
    title = ""
    if video is not None:
        title = video.display_title or ""
        if video.width and video.height:
            lowered = title.lower()
            if (
                f"{video.height}p" not in lowered
                and f"{video.width}x{video.height}" not in lowered
            ):
                title = f"{title} {video.height}p".strip()
        if video.codec and video.codec.lower() not in title.lower():
            title = f"{title} {video.codec.upper()}".strip()
    elif source.container:
        title = source.container.upper()
    if not title and source.name:
        title = source.name
    return title or "Direct Play"
