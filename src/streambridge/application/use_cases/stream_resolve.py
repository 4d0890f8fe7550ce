"""Stream resolution use case.

Composite id -> normalized id -> catalog lookup (movie, or series ->
season -> episode) -> playback info -> enrich + assemble -> dedupe ->
rank -> StreamDescriptor list.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

import structlog

from streambridge.domain.entities.media import (
    MediaSource,
    NormalizedId,
    RemoteItem,
    ServerConfig,
    StreamDescriptor,
)
from streambridge.domain.exceptions import MediaServerConfigError
from streambridge.domain.ports.media_server import MediaServerPort
from streambridge.infrastructure.media_server.id_parser import parse_composite_id
from streambridge.infrastructure.media_server.payloads import parse_playback_sources

# ---------------------------------------------------------------------------
# Protocols: what this use case needs from its dependencies.
# Infrastructure components satisfy these via structural subtyping.
# ---------------------------------------------------------------------------


class _ResolveConfig(Protocol):
    """Configuration values consumed by StreamResolveUseCase."""

    max_concurrent_requests: int


class _ItemResolver(Protocol):
    """Finds catalog items for a normalized id."""

    async def find_movies(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[RemoteItem]: ...

    async def find_series(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[RemoteItem]: ...

    async def find_episode(
        self,
        series: RemoteItem,
        season: int,
        episode: int,
        server: ServerConfig,
    ) -> RemoteItem | None: ...


class _StreamAssembler(Protocol):
    """Builds StreamDescriptors for an item's media sources."""

    def assemble_all(
        self,
        item: RemoteItem,
        sources: list[MediaSource],
        server: ServerConfig,
        *,
        series_name: str | None = None,
    ) -> list[StreamDescriptor]: ...


class _StreamSorter(Protocol):
    """Deduplicates by media source id and ranks best first."""

    def dedupe_and_sort(
        self, streams: list[StreamDescriptor]
    ) -> list[StreamDescriptor]: ...


log = structlog.get_logger(__name__)

_T = TypeVar("_T")


class StreamResolveUseCase:
    """Resolve a composite catalog id into ranked direct-play streams.

    Flow:
        1. Validate the server configuration (fatal when incomplete).
        2. Parse the composite id (fatal when malformed).
        3. Movies: find every matching movie item.
           Episodes: find every matching series, then the episode in each.
        4. Fetch playback info per item and assemble StreamDescriptors.
        5. Deduplicate by media source id and rank.

    Never raises: every failure ends in an empty list.
    """

    def __init__(
        self,
        *,
        media_server: MediaServerPort,
        resolver: _ItemResolver,
        assembler: _StreamAssembler,
        sorter: _StreamSorter,
        config: _ResolveConfig,
    ) -> None:
        self._media_server = media_server
        self._resolver = resolver
        self._assembler = assembler
        self._sorter = sorter
        self._max_concurrent = config.max_concurrent_requests

    async def execute(
        self, composite_id: str, server: ServerConfig
    ) -> list[StreamDescriptor]:
        """Resolve streams for *composite_id* on *server*.

        Returns:
            Ranked StreamDescriptors, best first.
            Empty list if the config is incomplete, the id is malformed,
            or nothing playable was found.
        """
        try:
            server.validate()
        except MediaServerConfigError as exc:
            log.error("media_server_config_missing", reason=str(exc))
            return []

        target = parse_composite_id(composite_id)
        if target is None:
            log.error("composite_id_unparseable", composite_id=composite_id)
            return []

        log.info(
            "stream_resolve_start",
            id=target.label,
            content_kind=target.content_kind.value,
            server_kind=server.kind,
        )

        try:
            if target.is_episode:
                streams = await self._episode_streams(target, server)
            else:
                streams = await self._movie_streams(target, server)
        except Exception:  # noqa: BLE001
            log.error("stream_resolve_unhandled_error", id=target.label, exc_info=True)
            return []

        if not streams:
            log.warning("stream_resolve_not_found", id=target.label)
            return []

        ranked = self._sorter.dedupe_and_sort(streams)
        log.info(
            "stream_resolve_complete",
            id=target.label,
            found=len(streams),
            stream_count=len(ranked),
        )
        return ranked

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    async def _movie_streams(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[StreamDescriptor]:
        movies = await self._resolver.find_movies(target, server)
        if not movies:
            return []

        per_item = await self._bounded_gather(
            [
                lambda m=movie: self._playback_streams(m, server)
                for movie in movies
            ]
        )
        return [s for streams in per_item for s in streams]

    async def _episode_streams(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[StreamDescriptor]:
        assert target.season is not None and target.episode is not None

        series_items = await self._resolver.find_series(target, server)
        if not series_items:
            log.warning("parent_series_not_found", id=target.label)
            return []

        async def _from_series(series: RemoteItem) -> list[StreamDescriptor] | None:
            episode = await self._resolver.find_episode(
                series, target.season, target.episode, server
            )
            if episode is None:
                return None
            return await self._playback_streams(
                episode, server, series_name=series.name
            )

        per_series = await self._bounded_gather(
            [lambda s=series: _from_series(s) for series in series_items]
        )

        missing = sum(1 for streams in per_series if streams is None)
        streams = [s for result in per_series if result for s in result]
        if not streams:
            if missing == len(series_items):
                log.warning(
                    "episode_not_found_in_any_series",
                    id=target.label,
                    series_count=len(series_items),
                )
            else:
                log.info(
                    "episode_found_without_streams",
                    id=target.label,
                    series_count=len(series_items),
                )
        return streams

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _playback_streams(
        self,
        item: RemoteItem,
        server: ServerConfig,
        *,
        series_name: str | None = None,
    ) -> list[StreamDescriptor]:
        """Fetch playback info for *item* and assemble its streams."""
        data = await self._media_server.get_json(
            server,
            f"/Items/{item.id}/PlaybackInfo",
            {"UserId": server.user_id},
        )
        sources = parse_playback_sources(data)
        if not sources:
            log.warning("no_media_sources", item=item.name, item_id=item.id)
            return []

        streams = self._assembler.assemble_all(
            item, sources, server, series_name=series_name
        )
        log.debug(
            "playback_streams_built",
            item_id=item.id,
            sources=len(sources),
            streams=len(streams),
        )
        return streams

    async def _bounded_gather(
        self, factories: list[Callable[[], Awaitable[_T]]]
    ) -> list[_T]:
        """Run coroutine factories concurrently; results keep input order."""
        semaphore = asyncio.Semaphore(max(1, self._max_concurrent))

        async def _run(factory: Callable[[], Awaitable[_T]]) -> _T:
            async with semaphore:
                return await factory()

        return list(await asyncio.gather(*(_run(f) for f in factories)))
