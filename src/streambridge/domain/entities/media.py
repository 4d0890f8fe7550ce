"""Domain entities for media server stream resolution.

Pure value objects with no framework dependencies and no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from streambridge.domain.exceptions import MediaServerConfigError

MediaServerKind = Literal["emby", "jellyfin"]


class ContentKind(str, Enum):
    """What a composite id points at."""

    MOVIE = "Movie"
    EPISODE = "Episode"


class ItemType(str, Enum):
    """Catalog item types reported by Emby/Jellyfin."""

    MOVIE = "Movie"
    SERIES = "Series"
    SEASON = "Season"
    EPISODE = "Episode"


class StreamType(str, Enum):
    """MediaStream track types."""

    VIDEO = "Video"
    AUDIO = "Audio"
    SUBTITLE = "Subtitle"


@dataclass(frozen=True)
class NormalizedId:
    """Canonical form of a composite catalog id.

    Exactly one of the provider ids is set. ``season`` and ``episode``
    are both set if and only if ``content_kind`` is EPISODE.
    """

    base_id: str  # "tt1234567", "tmdb123", "tvdb42", "anidb7"
    content_kind: ContentKind = ContentKind.MOVIE
    season: int | None = None
    episode: int | None = None
    imdb_id: str | None = None
    tmdb_id: str | None = None
    tvdb_id: str | None = None
    anidb_id: str | None = None

    @property
    def is_episode(self) -> bool:
        return self.content_kind is ContentKind.EPISODE

    @property
    def label(self) -> str:
        """Short form for logs, e.g. ``tt0903747 S1E1``."""
        if self.is_episode:
            return f"{self.base_id} S{self.season}E{self.episode}"
        return self.base_id


@dataclass(frozen=True)
class MediaStream:
    """One track (video, audio or subtitle) within a MediaSource."""

    type: str
    index: int | None = None
    codec: str | None = None
    language: str | None = None
    is_default: bool = False
    is_external: bool = False
    height: int | None = None
    width: int | None = None
    channels: int | None = None
    color_transfer: str | None = None
    extended_video_type: str | None = None
    display_title: str | None = None
    profile: str | None = None
    is_hdr: bool = False


@dataclass(frozen=True)
class MediaSource:
    """One playable rendition of a catalog item."""

    id: str
    container: str | None = None
    bitrate: int | None = None
    size: int | None = None
    path: str | None = None
    name: str | None = None
    supports_direct_play: bool = False
    supports_direct_stream: bool = False
    media_streams: list[MediaStream] | None = None


@dataclass(frozen=True)
class RemoteItem:
    """A catalog entry as reported by the media server."""

    id: str
    name: str = ""
    type: str = ""
    provider_ids: dict[str, str] = field(default_factory=dict)
    parent_index_number: int | None = None
    index_number: int | None = None
    media_sources: list[MediaSource] = field(default_factory=list)


@dataclass(frozen=True)
class TechnicalProfile:
    """Derived technical description of a MediaSource.

    Always fully populated; fields that could not be derived fall back
    to ``"Unknown"``, ``""`` or ``None``.
    """

    quality_tag: str = "Unknown"
    resolution_dimensions: str | None = None
    video_tag: str = ""
    video_codec: str | None = None
    hdr_tag: str | None = None
    audio_tag: str = ""
    audio_codec: str | None = None
    container: str = "Unknown"
    is_remux: bool = False
    bitrate: int | None = None
    bitrate_formatted: str | None = None
    size: int | None = None
    size_formatted: str | None = None
    filename: str = "stream"
    supports_direct_play: bool = False
    supports_direct_stream: bool = False


@dataclass(frozen=True)
class SubtitleDescriptor:
    """External subtitle track exposed to the player."""

    id: str
    language_code: str  # 3-letter code, "und" when unknown
    url: str


@dataclass(frozen=True)
class StreamDescriptor:
    """A playable stream for one MediaSource, ready for ranking.

    ``media_source_id`` is the identity key: two descriptors with the same
    id are the same underlying file.
    """

    direct_play_url: str
    item_id: str
    media_source_id: str
    item_name: str
    technical_profile: TechnicalProfile
    description: str
    series_name: str | None = None
    season_number: int | None = None
    episode_number: int | None = None
    subtitles: list[SubtitleDescriptor] = field(default_factory=list)
    quality_title: str = "Direct Play"


@dataclass(frozen=True)
class ServerConfig:
    """Connection details for one Emby/Jellyfin server."""

    server_url: str
    user_id: str
    access_token: str
    kind: MediaServerKind = "emby"

    def validate(self) -> None:
        """Raise MediaServerConfigError if a required field is blank."""
        missing = [
            name
            for name in ("server_url", "user_id", "access_token")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            raise MediaServerConfigError(
                f"Media server configuration missing: {', '.join(missing)}"
            )

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip("/")
