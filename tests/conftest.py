"""Shared test fixtures for the StreamBridge test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest

from streambridge.domain.entities import (
    MediaSource,
    MediaStream,
    RemoteItem,
    ServerConfig,
)

SERVER_URL = "https://emby.example.com"
USER_ID = "user-1"
ACCESS_TOKEN = "secret-token"

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def server() -> ServerConfig:
    """Complete Emby server config."""
    return ServerConfig(
        server_url=SERVER_URL,
        user_id=USER_ID,
        access_token=ACCESS_TOKEN,
    )


@pytest.fixture()
def jellyfin_server() -> ServerConfig:
    return ServerConfig(
        server_url="https://jf.example.com/",
        user_id=USER_ID,
        access_token=ACCESS_TOKEN,
        kind="jellyfin",
    )


@pytest.fixture()
def video_4k_hdr() -> MediaStream:
    return MediaStream(
        type="Video",
        index=0,
        codec="hevc",
        width=3840,
        height=2160,
        extended_video_type="Hdr10",
        profile="Main 10",
        display_title="4K HEVC HDR10",
    )


@pytest.fixture()
def audio_eac3() -> MediaStream:
    return MediaStream(
        type="Audio",
        index=1,
        codec="eac3",
        channels=6,
        language="eng",
        is_default=True,
    )


@pytest.fixture()
def subtitle_srt() -> MediaStream:
    return MediaStream(type="Subtitle", index=2, codec="subrip", language="ger")


@pytest.fixture()
def source_4k(
    video_4k_hdr: MediaStream, audio_eac3: MediaStream, subtitle_srt: MediaStream
) -> MediaSource:
    """4K HDR10 remux with one subtitle track."""
    return MediaSource(
        id="ms-4k",
        container="mkv",
        bitrate=58_400_000,
        size=62_277_025_792,
        path="/media/movies/Shawshank (1994)/Shawshank.2160p.REMUX.mkv",
        name="Shawshank 2160p REMUX",
        supports_direct_play=True,
        supports_direct_stream=True,
        media_streams=[video_4k_hdr, audio_eac3, subtitle_srt],
    )


@pytest.fixture()
def source_1080() -> MediaSource:
    return MediaSource(
        id="ms-1080",
        container="mp4",
        bitrate=8_000_000,
        size=4_294_967_296,
        path="/media/movies/Shawshank (1994)/Shawshank.1080p.mp4",
        supports_direct_play=True,
        media_streams=[
            MediaStream(type="Video", index=0, codec="h264", width=1920, height=1080),
            MediaStream(type="Audio", index=1, codec="aac", channels=2),
        ],
    )


@pytest.fixture()
def movie_item() -> RemoteItem:
    return RemoteItem(
        id="item-1",
        name="The Shawshank Redemption",
        type="Movie",
        provider_ids={"Imdb": "tt0111161", "Tmdb": "278"},
    )


# ---------------------------------------------------------------------------
# Port fixtures
# ---------------------------------------------------------------------------


def _routed_media_server(routes: dict[str, Any]) -> AsyncMock:
    media_server = AsyncMock()

    async def _get_json(server: ServerConfig, path: str, params: Any = None) -> Any:
        answer = routes.get(path)
        if callable(answer):
            return answer(params or {})
        return answer

    media_server.get_json.side_effect = _get_json
    return media_server


@pytest.fixture()
def routed_media_server() -> Callable[[dict[str, Any]], AsyncMock]:
    """Factory for a MediaServerPort mock answering ``get_json`` by path.

    Route values may be a payload dict or a callable ``(params) -> payload``.
    Unknown paths answer None, like a failed request.
    """
    return _routed_media_server


@pytest.fixture()
def media_server() -> AsyncMock:
    """MediaServerPort that answers None to everything."""
    mock = AsyncMock()
    mock.get_json.return_value = None
    return mock
