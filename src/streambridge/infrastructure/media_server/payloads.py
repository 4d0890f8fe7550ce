"""Map raw Emby/Jellyfin JSON into domain entities.

Servers omit fields, send numbers as strings, or send ``null`` lists.
Every coercion here degrades to ``None``/defaults instead of raising.
"""

from __future__ import annotations

import math
from typing import Any

from streambridge.domain.entities.media import MediaSource, MediaStream, RemoteItem


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    return None


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def parse_media_stream(raw: dict[str, Any]) -> MediaStream:
    return MediaStream(
        type=str(raw.get("Type") or ""),
        index=_as_int(raw.get("Index")),
        codec=_as_str(raw.get("Codec")),
        language=_as_str(raw.get("Language")),
        is_default=raw.get("IsDefault") is True,
        is_external=raw.get("IsExternal") is True,
        height=_as_int(raw.get("Height")),
        width=_as_int(raw.get("Width")),
        channels=_as_int(raw.get("Channels")),
        color_transfer=_as_str(raw.get("ColorTransfer")),
        extended_video_type=_as_str(raw.get("ExtendedVideoType")),
        display_title=_as_str(raw.get("DisplayTitle")),
        profile=_as_str(raw.get("Profile")),
        is_hdr=raw.get("IsHDR") is True,
    )


def parse_media_source(raw: dict[str, Any]) -> MediaSource:
    streams = raw.get("MediaStreams")
    return MediaSource(
        id=str(raw.get("Id") or ""),
        container=_as_str(raw.get("Container")),
        bitrate=_as_int(raw.get("Bitrate")),
        size=_as_int(raw.get("Size")),
        path=_as_str(raw.get("Path")),
        name=_as_str(raw.get("Name")),
        supports_direct_play=raw.get("SupportsDirectPlay") is True,
        supports_direct_stream=raw.get("SupportsDirectStream") is True,
        media_streams=(
            [parse_media_stream(s) for s in streams if isinstance(s, dict)]
            if isinstance(streams, list)
            else None
        ),
    )


def parse_item(raw: dict[str, Any]) -> RemoteItem:
    provider_ids = raw.get("ProviderIds")
    return RemoteItem(
        id=str(raw.get("Id") or ""),
        name=str(raw.get("Name") or ""),
        type=str(raw.get("Type") or ""),
        provider_ids=(
            {str(k): str(v) for k, v in provider_ids.items() if v is not None}
            if isinstance(provider_ids, dict)
            else {}
        ),
        parent_index_number=_as_int(raw.get("ParentIndexNumber")),
        index_number=_as_int(raw.get("IndexNumber")),
        media_sources=[
            parse_media_source(s)
            for s in _as_list(raw.get("MediaSources"))
            if isinstance(s, dict)
        ],
    )


def parse_items(data: dict[str, Any] | None) -> list[RemoteItem]:
    """Parse the ``Items`` array of a query response (empty on None)."""
    if not data:
        return []
    return [
        parse_item(raw)
        for raw in _as_list(data.get("Items"))
        if isinstance(raw, dict) and raw.get("Id")
    ]


def parse_playback_sources(data: dict[str, Any] | None) -> list[MediaSource]:
    """Parse the ``MediaSources`` array of a PlaybackInfo response."""
    if not data:
        return []
    return [
        parse_media_source(raw)
        for raw in _as_list(data.get("MediaSources"))
        if isinstance(raw, dict)
    ]
