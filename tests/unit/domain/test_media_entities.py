"""Tests for media domain entities."""

from __future__ import annotations

import dataclasses

import pytest

from streambridge.domain.entities import (
    ContentKind,
    NormalizedId,
    ServerConfig,
    TechnicalProfile,
)
from streambridge.domain.exceptions import MediaServerConfigError, StreamBridgeError


class TestNormalizedId:
    def test_movie_label(self) -> None:
        nid = NormalizedId(base_id="tt0111161", imdb_id="tt0111161")
        assert not nid.is_episode
        assert nid.label == "tt0111161"

    def test_episode_label(self) -> None:
        nid = NormalizedId(
            base_id="tt0903747",
            content_kind=ContentKind.EPISODE,
            season=1,
            episode=2,
            imdb_id="tt0903747",
        )
        assert nid.is_episode
        assert nid.label == "tt0903747 S1E2"

    def test_frozen(self) -> None:
        nid = NormalizedId(base_id="tt1", imdb_id="tt1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            nid.base_id = "tt2"  # type: ignore[misc]


class TestServerConfig:
    def test_validate_complete(self, server: ServerConfig) -> None:
        server.validate()

    def test_validate_lists_missing_fields(self) -> None:
        cfg = ServerConfig(server_url="https://x", user_id=" ", access_token="")
        with pytest.raises(MediaServerConfigError) as exc_info:
            cfg.validate()
        assert "user_id" in str(exc_info.value)
        assert "access_token" in str(exc_info.value)
        assert "server_url" not in str(exc_info.value)

    def test_config_error_is_streambridge_error(self) -> None:
        assert issubclass(MediaServerConfigError, StreamBridgeError)

    def test_base_url_strips_trailing_slash(self) -> None:
        cfg = ServerConfig(server_url="https://x/emby/", user_id="u", access_token="t")
        assert cfg.base_url == "https://x/emby"

    def test_default_kind_is_emby(self, server: ServerConfig) -> None:
        assert server.kind == "emby"


class TestTechnicalProfileDefaults:
    def test_safe_defaults(self) -> None:
        profile = TechnicalProfile()
        assert profile.quality_tag == "Unknown"
        assert profile.container == "Unknown"
        assert profile.filename == "stream"
        assert profile.hdr_tag is None
        assert profile.is_remux is False
