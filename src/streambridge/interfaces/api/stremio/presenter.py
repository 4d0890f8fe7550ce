"""Stremio JSON presentation: manifest, stream objects, hide-list filter."""

from __future__ import annotations

import re
from typing import Any

from streambridge.domain.entities.media import StreamDescriptor
from streambridge.infrastructure.config.schema import StremioConfig
from streambridge.interfaces.api.stremio.user_config import AddonUserConfig

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}


def build_manifest(config: StremioConfig) -> dict[str, Any]:
    """Unconfigured manifest; Stremio asks the user to configure it."""
    return {
        "id": config.addon_id,
        "version": config.addon_version,
        "name": config.addon_name,
        "description": (
            "Stream media from your personal or shared Emby/Jellyfin server "
            "using IMDb/TMDB IDs."
        ),
        "catalogs": [],
        "resources": [
            {
                "name": "stream",
                "types": ["movie", "series"],
                "idPrefixes": ["tt", "imdb:", "tmdb:"],
            }
        ],
        "types": ["movie", "series"],
        "behaviorHints": {"configurable": True, "configurationRequired": True},
        "config": [
            {"key": "serverUrl", "type": "text", "title": "Server URL", "required": True},
            {"key": "userId", "type": "text", "title": "User ID", "required": True},
            {
                "key": "accessToken",
                "type": "text",
                "title": "Access Token",
                "required": True,
            },
        ],
    }


def build_configured_manifest(
    config: StremioConfig, user: AddonUserConfig, segment: str
) -> dict[str, Any]:
    """Manifest for an installed config: unique id, optional server label."""
    manifest = build_manifest(config)
    manifest["id"] = f"{config.addon_id}.{segment[:8]}"
    if user.show_server_name:
        host = _SCHEME_RE.sub("", user.server_url) or "Unknown Server"
        manifest["name"] = f"{manifest['name']} ({host})"
    manifest["behaviorHints"]["configurationRequired"] = False
    return manifest


def is_hidden(stream: StreamDescriptor, hide_types: list[str]) -> bool:
    """True when the user's hide list excludes *stream*.

    ``4K`` hides 4K and 2160p, ``DV``/``DolbyVision`` hides Dolby Vision,
    ``HDR``/``HDRTag`` hides every HDR flavour, and ``HDR10``, ``HDR10+``
    and ``HLG`` hide exactly that tag.
    """
    if not hide_types:
        return False
    hide = set(hide_types)
    quality = stream.technical_profile.quality_tag or ""
    hdr = stream.technical_profile.hdr_tag or ""

    if "4K" in hide and ("4K" in quality or quality == "2160p"):
        return True
    if hide & {"DV", "DolbyVision"} and hdr in ("DV", "DolbyVision"):
        return True
    if hide & {"HDR", "HDRTag"} and hdr and ("HDR" in hdr or hdr in ("HLG", "DV")):
        return True
    return bool(hdr) and hdr in hide & {"HDR10", "HDR10+", "HLG"}


def format_stream(stream: StreamDescriptor, name: str) -> dict[str, Any]:
    """Convert a StreamDescriptor to a Stremio stream object."""
    profile = stream.technical_profile
    hints: dict[str, Any] = {
        "notWebReady": True,
        "bingeGroup": f"emby-{stream.item_id}",
    }
    if profile.filename:
        hints["filename"] = profile.filename
    if profile.size:
        hints["videoSize"] = profile.size
    return {
        "name": name,
        "description": stream.description or stream.quality_title or "Direct Play",
        "url": stream.direct_play_url,
        "behaviorHints": hints,
        "subtitles": [
            {"id": sub.id, "url": sub.url, "lang": sub.language_code}
            for sub in stream.subtitles
        ],
    }


def present_streams(
    streams: list[StreamDescriptor], user: AddonUserConfig, default_name: str
) -> list[dict[str, Any]]:
    """Drop URL-less and hidden streams, keep rank order, format the rest."""
    name = user.stream_name or default_name
    return [
        format_stream(s, name)
        for s in streams
        if s.direct_play_url and not is_hidden(s, user.hide_stream_types)
    ]
