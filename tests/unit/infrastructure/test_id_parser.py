"""Tests for composite catalog id parsing."""

from __future__ import annotations

import pytest

from streambridge.domain.entities import ContentKind
from streambridge.domain.exceptions import CompositeIdError
from streambridge.infrastructure.media_server.id_parser import (
    parse_composite_id,
    parse_composite_id_strict,
)


class TestSingleSegment:
    def test_imdb_movie(self) -> None:
        nid = parse_composite_id_strict("tt0111161")
        assert nid.base_id == "tt0111161"
        assert nid.imdb_id == "tt0111161"
        assert nid.content_kind is ContentKind.MOVIE
        assert nid.season is None
        assert nid.episode is None

    @pytest.mark.parametrize(
        ("raw", "field", "value"),
        [
            ("tmdb278", "tmdb_id", "278"),
            ("tvdb81189", "tvdb_id", "81189"),
            ("anidb69", "anidb_id", "69"),
        ],
    )
    def test_bare_provider_ids(self, raw: str, field: str, value: str) -> None:
        nid = parse_composite_id_strict(raw)
        assert getattr(nid, field) == value
        assert nid.imdb_id is None

    def test_unknown_prefix_rejected(self) -> None:
        with pytest.raises(CompositeIdError):
            parse_composite_id_strict("nm0000151")

    def test_bare_imdb_word_rejected(self) -> None:
        with pytest.raises(CompositeIdError):
            parse_composite_id_strict("imdb0111161")


class TestPrefixedSegment:
    def test_imdb_without_tt(self) -> None:
        nid = parse_composite_id_strict("imdb:0111161")
        assert nid.imdb_id == "tt0111161"
        assert nid.base_id == "tt0111161"

    def test_imdb_with_tt(self) -> None:
        assert parse_composite_id_strict("imdb:tt0111161").imdb_id == "tt0111161"

    def test_tmdb(self) -> None:
        nid = parse_composite_id_strict("tmdb:278")
        assert nid.tmdb_id == "278"
        assert nid.base_id == "tmdb278"
        assert nid.content_kind is ContentKind.MOVIE

    def test_prefix_case_insensitive(self) -> None:
        assert parse_composite_id_strict("TMDB:278").tmdb_id == "278"

    def test_empty_value_rejected(self) -> None:
        with pytest.raises(CompositeIdError):
            parse_composite_id_strict("tmdb:")

    def test_unsupported_prefix_rejected(self) -> None:
        with pytest.raises(CompositeIdError):
            parse_composite_id_strict("kitsu:123")


class TestEpisodeIds:
    def test_imdb_episode(self) -> None:
        nid = parse_composite_id_strict("tt0903747:1:2")
        assert nid.content_kind is ContentKind.EPISODE
        assert nid.imdb_id == "tt0903747"
        assert (nid.season, nid.episode) == (1, 2)

    def test_season_zero_allowed(self) -> None:
        nid = parse_composite_id_strict("tt0903747:0:3")
        assert nid.season == 0

    @pytest.mark.parametrize(
        "raw", ["tt0903747:a:1", "tt0903747:1:", "tt0903747:-1:2", "tt0903747:1:2.5"]
    )
    def test_bad_season_or_episode(self, raw: str) -> None:
        with pytest.raises(CompositeIdError):
            parse_composite_id_strict(raw)

    def test_four_segments_rejected(self) -> None:
        with pytest.raises(CompositeIdError):
            parse_composite_id_strict("tmdb:1396:1:2")


class TestLenientParse:
    def test_returns_none_on_failure(self) -> None:
        assert parse_composite_id("") is None
        assert parse_composite_id("garbage") is None
        assert parse_composite_id("a:b:c:d:e") is None

    def test_returns_id_on_success(self) -> None:
        nid = parse_composite_id("tt0111161")
        assert nid is not None
        assert nid.imdb_id == "tt0111161"
