"""Tests for provider id matching."""

from __future__ import annotations

from streambridge.domain.entities import NormalizedId
from streambridge.infrastructure.media_server.provider_ids import (
    matches_normalized_id,
    matches_provider_ids,
)


class TestImdbMatching:
    def test_exact(self) -> None:
        assert matches_provider_ids({"Imdb": "tt0111161"}, imdb_id="tt0111161")

    def test_key_case_insensitive(self) -> None:
        assert matches_provider_ids({"IMDB": "tt0111161"}, imdb_id="tt0111161")
        assert matches_provider_ids({"imdb": "tt0111161"}, imdb_id="tt0111161")

    def test_stored_without_tt_prefix(self) -> None:
        assert matches_provider_ids({"Imdb": "0111161"}, imdb_id="tt0111161")

    def test_empty_casing_does_not_shadow_another(self) -> None:
        assert matches_provider_ids({"IMDB": "", "Imdb": "tt1"}, imdb_id="tt1")
        assert matches_provider_ids({"tmdb": "", "Tmdb": 278}, tmdb_id="278")

    def test_different_id(self) -> None:
        assert not matches_provider_ids({"Imdb": "tt0068646"}, imdb_id="tt0111161")


class TestOtherProviders:
    def test_tmdb_int_value(self) -> None:
        assert matches_provider_ids({"Tmdb": 278}, tmdb_id="278")

    def test_anidb_mixed_case_key(self) -> None:
        assert matches_provider_ids({"AniDb": "69"}, anidb_id="69")

    def test_tvdb_exact_only(self) -> None:
        assert not matches_provider_ids({"Tvdb": "811890"}, tvdb_id="81189")


class TestEdgeCases:
    def test_empty_map_never_matches(self) -> None:
        assert not matches_provider_ids({}, imdb_id="tt0111161")
        assert not matches_provider_ids(None, imdb_id="tt0111161")

    def test_no_targets(self) -> None:
        assert not matches_provider_ids({"Imdb": "tt0111161"})

    def test_any_target_matching_is_enough(self) -> None:
        assert matches_provider_ids(
            {"Imdb": "tt9999999", "Tmdb": "278"},
            imdb_id="tt0111161",
            tmdb_id="278",
        )


class TestMatchesNormalizedId:
    def test_uses_target_ids(self) -> None:
        target = NormalizedId(base_id="tmdb278", tmdb_id="278")
        assert matches_normalized_id({"Tmdb": "278"}, target)
        assert not matches_normalized_id({"Imdb": "tt0111161"}, target)
