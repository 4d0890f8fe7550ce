"""Tests for Emby/Jellyfin JSON payload parsing."""

from __future__ import annotations

import json

import pytest

from streambridge.infrastructure.media_server.payloads import (
    parse_item,
    parse_items,
    parse_media_source,
    parse_playback_sources,
)

_EPISODE_JSON = {
    "Id": "ep-1",
    "Name": "Pilot",
    "Type": "Episode",
    "IndexNumber": "1",
    "ParentIndexNumber": 1,
    "ProviderIds": {"Imdb": "tt0959621", "Tvdb": 349232, "Empty": None},
    "MediaSources": [{"Id": "ms-1", "Container": "mkv"}],
}


class TestParseItem:
    def test_fields(self) -> None:
        item = parse_item(_EPISODE_JSON)
        assert item.id == "ep-1"
        assert item.type == "Episode"
        assert item.index_number == 1
        assert item.parent_index_number == 1
        assert item.provider_ids == {"Imdb": "tt0959621", "Tvdb": "349232"}
        assert [s.id for s in item.media_sources] == ["ms-1"]

    def test_missing_everything(self) -> None:
        item = parse_item({"Id": 42})
        assert item.id == "42"
        assert item.name == ""
        assert item.provider_ids == {}
        assert item.media_sources == []


class TestParseItems:
    def test_skips_entries_without_id(self) -> None:
        items = parse_items({"Items": [_EPISODE_JSON, {"Name": "no id"}, "junk"]})
        assert [i.id for i in items] == ["ep-1"]

    def test_none_and_missing_items(self) -> None:
        assert parse_items(None) == []
        assert parse_items({}) == []
        assert parse_items({"Items": None}) == []


class TestParseMediaSource:
    def test_null_streams_stay_none(self) -> None:
        source = parse_media_source({"Id": "ms", "MediaStreams": None})
        assert source.media_streams is None

    def test_stream_coercion(self) -> None:
        source = parse_media_source(
            {
                "Id": "ms",
                "Bitrate": "8000000",
                "Size": 1024.0,
                "SupportsDirectPlay": True,
                "MediaStreams": [
                    {"Type": "Video", "Width": "1920", "Height": 1080, "IsHDR": "yes"},
                    {"Type": "Audio", "Channels": "bad"},
                ],
            }
        )
        assert source.bitrate == 8_000_000
        assert source.size == 1024
        assert source.supports_direct_play is True
        assert source.supports_direct_stream is False
        video, audio = source.media_streams or []
        assert (video.width, video.height) == (1920, 1080)
        assert video.is_hdr is False
        assert audio.channels is None

    @pytest.mark.parametrize("raw", ["1e400", "inf", "nan", float("inf"), float("nan")])
    def test_non_finite_numbers_dropped(self, raw: object) -> None:
        source = parse_media_source({"Id": "ms", "Bitrate": raw, "Size": raw})
        assert source.bitrate is None
        assert source.size is None

    def test_json_infinity_literal(self) -> None:
        raw = json.loads('{"Id": "ms", "Bitrate": Infinity, "Size": -Infinity}')
        source = parse_media_source(raw)
        assert (source.bitrate, source.size) == (None, None)


class TestParsePlaybackSources:
    def test_sources(self) -> None:
        sources = parse_playback_sources(
            {"MediaSources": [{"Id": "a"}, {"Id": "b"}, None]}
        )
        assert [s.id for s in sources] == ["a", "b"]

    def test_none(self) -> None:
        assert parse_playback_sources(None) == []
