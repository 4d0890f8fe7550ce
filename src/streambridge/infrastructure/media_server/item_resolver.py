"""Locate movies, series and episodes on an Emby/Jellyfin server.

Server-side provider id filters are not reliable (inexact, case
sensitive, or silently ignored), so lookups are expressed as an ordered
list of query stages. Each stage may hold several query variants; the
first stage that yields at least one locally verified match wins.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from streambridge.domain.entities.media import (
    ItemType,
    NormalizedId,
    RemoteItem,
    ServerConfig,
)
from streambridge.domain.ports.media_server import MediaServerPort
from streambridge.infrastructure.media_server.payloads import parse_items
from streambridge.infrastructure.media_server.provider_ids import (
    matches_normalized_id,
)

log = structlog.get_logger(__name__)

DEFAULT_FIELDS = "ProviderIds,Name,MediaSources,Path,Id,IndexNumber,ParentIndexNumber"
SERIES_FIELDS = "ProviderIds,Name,Id"
SEASON_FIELDS = "Id,IndexNumber,Name"

# (family, direct query field, AnyProviderIdEquals key casings)
_PROVIDER_QUERY_FIELDS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("imdb_id", "ImdbId", ("imdb", "Imdb")),
    ("tmdb_id", "TmdbId", ("tmdb", "Tmdb")),
    ("tvdb_id", "TvdbId", ("tvdb", "Tvdb")),
    ("anidb_id", "AniDbId", ("anidb", "AniDb")),
)


@dataclass(frozen=True)
class QuerySpec:
    """One catalog query: an API path plus its query params."""

    path: str
    params: dict[str, Any] = field(default_factory=dict)
    label: str = ""


def _authoritative_id(target: NormalizedId) -> tuple[str, str, tuple[str, ...], str] | None:
    """Return (family, field, casings, value) for the id carried by *target*."""
    for family, query_field, casings in _PROVIDER_QUERY_FIELDS:
        value = getattr(target, family)
        if value:
            return family, query_field, casings, value
    return None


def any_provider_id_values(target: NormalizedId) -> list[str]:
    """``AnyProviderIdEquals`` permutations for *target*.

    IMDb also tries the numeric form for servers that store ids
    without the ``tt`` prefix.
    """
    resolved = _authoritative_id(target)
    if resolved is None:
        return []
    family, _, casings, value = resolved
    values = [f"{key}.{value}" for key in casings]
    if family == "imdb_id":
        numeric = value.removeprefix("tt")
        if numeric and numeric != value:
            values.extend(f"{key}.{numeric}" for key in casings)
    return values


async def first_verified(
    media_server: MediaServerPort,
    server: ServerConfig,
    stages: Sequence[Sequence[QuerySpec]],
    verify: Callable[[RemoteItem], bool],
) -> list[RemoteItem]:
    """Run query stages in order until one yields verified items.

    All queries of a stage are issued and their verified matches kept
    (deduplicated by item id, first occurrence wins). Later stages run
    only when every earlier stage came back empty.
    """
    for stage_no, stage in enumerate(stages, start=1):
        found: dict[str, RemoteItem] = {}
        for spec in stage:
            data = await media_server.get_json(server, spec.path, spec.params)
            candidates = parse_items(data)
            verified = [item for item in candidates if verify(item)]
            log.debug(
                "catalog_query_done",
                stage=stage_no,
                query=spec.label,
                candidates=len(candidates),
                verified=len(verified),
            )
            for item in verified:
                found.setdefault(item.id, item)
        if found:
            return list(found.values())
    return []


class ItemResolver:
    """Resolve a NormalizedId into catalog items on one media server."""

    def __init__(
        self,
        *,
        media_server: MediaServerPort,
        movie_query_limit: int = 10,
        series_query_limit: int = 5,
    ) -> None:
        self._media_server = media_server
        self._movie_limit = movie_query_limit
        self._series_limit = series_query_limit

    # ------------------------------------------------------------------
    # Query plans
    # ------------------------------------------------------------------

    def movie_query_stages(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[list[QuerySpec]]:
        resolved = _authoritative_id(target)
        if resolved is None:
            return []
        _, query_field, _, value = resolved
        base: dict[str, Any] = {
            "IncludeItemTypes": ItemType.MOVIE.value,
            "Recursive": "true",
            "Fields": DEFAULT_FIELDS,
            "Limit": self._movie_limit,
            "Filters": "IsNotFolder",
        }
        direct = QuerySpec(
            path="/Items",
            params={**base, "UserId": server.user_id, query_field: value},
            label=f"{query_field}={value}",
        )
        fallbacks = [
            QuerySpec(
                path=f"/Users/{server.user_id}/Items",
                params={**base, "AnyProviderIdEquals": candidate},
                label=f"AnyProviderIdEquals={candidate}",
            )
            for candidate in any_provider_id_values(target)
        ]
        return [[direct], fallbacks]

    def series_query_stages(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[list[QuerySpec]]:
        resolved = _authoritative_id(target)
        if resolved is None:
            return []
        _, query_field, _, value = resolved
        path = f"/Users/{server.user_id}/Items"
        base: dict[str, Any] = {
            "IncludeItemTypes": ItemType.SERIES.value,
            "Recursive": "true",
            "Fields": SERIES_FIELDS,
            "Limit": self._series_limit,
        }
        direct = QuerySpec(
            path=path,
            params={**base, query_field: value},
            label=f"{query_field}={value}",
        )
        fallbacks = [
            QuerySpec(
                path=path,
                params={**base, "AnyProviderIdEquals": candidate},
                label=f"AnyProviderIdEquals={candidate}",
            )
            for candidate in any_provider_id_values(target)
        ]
        return [[direct], fallbacks]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def find_movies(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[RemoteItem]:
        """All movie items whose provider ids match *target*."""
        movies = await first_verified(
            self._media_server,
            server,
            self.movie_query_stages(target, server),
            lambda item: matches_normalized_id(item.provider_ids, target),
        )
        if not movies:
            log.info("movie_not_found", id=target.label)
        return movies

    async def find_series(
        self, target: NormalizedId, server: ServerConfig
    ) -> list[RemoteItem]:
        """All series items whose provider ids match *target*."""
        series = await first_verified(
            self._media_server,
            server,
            self.series_query_stages(target, server),
            lambda item: matches_normalized_id(item.provider_ids, target),
        )
        if not series:
            log.info("series_not_found", id=target.label)
        return series

    async def find_episode(
        self,
        series: RemoteItem,
        season: int,
        episode: int,
        server: ServerConfig,
    ) -> RemoteItem | None:
        """Find episode S{season}E{episode} within one series, or None."""
        seasons_data = await self._media_server.get_json(
            server,
            f"/Shows/{series.id}/Seasons",
            {"UserId": server.user_id, "Fields": SEASON_FIELDS},
        )
        seasons = parse_items(seasons_data)
        if not seasons:
            log.warning("series_has_no_seasons", series=series.name, series_id=series.id)
            return None

        target_season = next((s for s in seasons if s.index_number == season), None)
        if target_season is None:
            log.info("season_not_found", series=series.name, season=season)
            return None

        episodes_data = await self._media_server.get_json(
            server,
            f"/Shows/{series.id}/Episodes",
            {
                "SeasonId": target_season.id,
                "UserId": server.user_id,
                "Fields": DEFAULT_FIELDS,
            },
        )
        episodes = parse_items(episodes_data)
        if not episodes:
            log.warning(
                "season_has_no_episodes", series=series.name, season=season
            )
            return None

        match = next(
            (
                ep
                for ep in episodes
                if ep.index_number == episode and ep.parent_index_number == season
            ),
            None,
        )
        if match is None:
            log.info(
                "episode_not_found",
                series=series.name,
                season=season,
                episode=episode,
            )
        return match
