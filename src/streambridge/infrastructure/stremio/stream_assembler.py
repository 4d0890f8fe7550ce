"""Build direct-play StreamDescriptors from resolved catalog items."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import quote, urlencode

import structlog

from streambridge.domain.entities.media import (
    ItemType,
    MediaSource,
    MediaStream,
    RemoteItem,
    ServerConfig,
    StreamDescriptor,
    SubtitleDescriptor,
)
from streambridge.infrastructure.stremio.media_info import (
    build_description,
    build_quality_title,
    extract_technical_profile,
    select_subtitle_streams,
    select_video_stream,
)

log = structlog.get_logger(__name__)

SUBTITLE_EXTENSIONS: Mapping[str, str] = MappingProxyType(
    {
        "subrip": "srt",
        "webvtt": "vtt",
        "ass": "ass",
        "ssa": "ssa",
    }
)
DEFAULT_SUBTITLE_EXTENSION = "srt"
UNDETERMINED_LANGUAGE = "und"
DEFAULT_DEVICE_ID = "stremio-addon-device-id"


def subtitle_extension(codec: str | None) -> str:
    return SUBTITLE_EXTENSIONS.get((codec or "").lower(), DEFAULT_SUBTITLE_EXTENSION)


class StreamAssembler:
    """Turns a RemoteItem's MediaSources into playable StreamDescriptors."""

    def __init__(self, *, device_id: str = DEFAULT_DEVICE_ID) -> None:
        self._device_id = device_id

    def direct_play_url(
        self, item: RemoteItem, source: MediaSource, server: ServerConfig
    ) -> str:
        """Static stream URL serving the original file bytes."""
        query = urlencode(
            {
                "MediaSourceId": source.id,
                "Static": "true",
                "api_key": server.access_token,
                "DeviceId": self._device_id,
            }
        )
        container = quote(source.container or "", safe="")
        return f"{server.base_url}/Videos/{quote(item.id, safe='')}/stream.{container}?{query}"

    def subtitle(
        self,
        item: RemoteItem,
        source: MediaSource,
        track: MediaStream,
        server: ServerConfig,
    ) -> SubtitleDescriptor:
        ext = subtitle_extension(track.codec)
        url = (
            f"{server.base_url}/Videos/{quote(item.id, safe='')}/"
            f"{quote(source.id, safe='')}/Subtitles/{track.index}/Stream.{ext}"
            f"?{urlencode({'api_key': server.access_token})}"
        )
        return SubtitleDescriptor(
            id=f"sub-{item.id}-{source.id}-{track.index}",
            language_code=track.language or UNDETERMINED_LANGUAGE,
            url=url,
        )

    def assemble(
        self,
        item: RemoteItem,
        source: MediaSource,
        server: ServerConfig,
        *,
        series_name: str | None = None,
    ) -> StreamDescriptor:
        """Build the descriptor for one MediaSource.

        Enrichment failures degrade the technical profile; they never
        drop the source.
        """
        profile = extract_technical_profile(source)
        is_episode = item.type == ItemType.EPISODE.value
        return StreamDescriptor(
            direct_play_url=self.direct_play_url(item, source, server),
            item_id=item.id,
            media_source_id=source.id,
            item_name=item.name,
            technical_profile=profile,
            description=build_description(profile),
            series_name=series_name,
            season_number=item.parent_index_number if is_episode else None,
            episode_number=item.index_number if is_episode else None,
            subtitles=[
                self.subtitle(item, source, track, server)
                for track in select_subtitle_streams(source)
            ],
            quality_title=build_quality_title(source, select_video_stream(source)),
        )

    def assemble_all(
        self,
        item: RemoteItem,
        sources: list[MediaSource],
        server: ServerConfig,
        *,
        series_name: str | None = None,
    ) -> list[StreamDescriptor]:
        """Descriptors for every MediaSource of *item*.

        A source whose descriptor cannot be built is logged and skipped;
        siblings are unaffected.
        """
        descriptors: list[StreamDescriptor] = []
        for source in sources:
            try:
                descriptors.append(
                    self.assemble(item, source, server, series_name=series_name)
                )
            except Exception:  # noqa: BLE001
                log.warning(
                    "stream_assembly_failed",
                    item_id=item.id,
                    media_source_id=source.id,
                    exc_info=True,
                )
        return descriptors
