"""Stream deduplication and ranking for the Stremio addon.

Orders streams by direct play, resolution, HDR, remux and bitrate.
The resolution ladder is fixed; lower rank means better.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from streambridge.domain.entities.media import StreamDescriptor

RESOLUTION_RANKS: Mapping[str, int] = MappingProxyType(
    {
        "4K DCI": 0,
        "4K": 1,
        "2160p": 2,
        "1440p": 3,
        "1080p": 4,
        "720p": 5,
        "576p": 6,
        "480p": 7,
        "360p": 8,
        "SD": 9,
        "Unknown": 10,
    }
)
_UNRANKED = RESOLUTION_RANKS["Unknown"]

SortKey = tuple[int, int, int, int, int]


class StreamSorter:
    """Ranking: Direct play > resolution > HDR > remux > bitrate.

    Score tuple (ascending = better):
    (not direct play, resolution rank, no HDR, not remux, -bitrate)

    A 1080p direct-play stream outranks a 4K stream that needs
    transcoding; among equal resolutions HDR beats SDR.
    """

    @staticmethod
    def rank(stream: StreamDescriptor) -> SortKey:
        """Calculate the sort key for a single stream."""
        profile = stream.technical_profile
        return (
            0 if profile.supports_direct_play else 1,
            RESOLUTION_RANKS.get(profile.quality_tag, _UNRANKED),
            0 if profile.hdr_tag else 1,
            0 if profile.is_remux else 1,
            -(profile.bitrate or 0),
        )

    @staticmethod
    def deduplicate(streams: Iterable[StreamDescriptor]) -> list[StreamDescriptor]:
        """Collapse streams sharing a media source id.

        The last occurrence wins; duplicates are content-identical.
        Order follows the first occurrence of each id.
        """
        unique: dict[str, StreamDescriptor] = {}
        for stream in streams:
            unique[stream.media_source_id] = stream
        return list(unique.values())

    def sort(self, streams: Iterable[StreamDescriptor]) -> list[StreamDescriptor]:
        """Sort streams best first. Returns a new list."""
        return sorted(streams, key=self.rank)

    def dedupe_and_sort(
        self, streams: Iterable[StreamDescriptor]
    ) -> list[StreamDescriptor]:
        return self.sort(self.deduplicate(streams))
