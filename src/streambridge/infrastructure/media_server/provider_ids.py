"""Provider id matching across Emby/Jellyfin encoding quirks.

Servers disagree on key casing (``Imdb``/``imdb``/``IMDB``, ``AniDb``),
store numbers as ints or strings, and sometimes keep IMDb ids without
the ``tt`` prefix. Everything here absorbs that variance.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from streambridge.domain.entities.media import NormalizedId


def _value_for(provider_ids: Mapping[str, Any], family: str) -> str | None:
    """Case-insensitive key lookup, stringifying the stored value.

    Empty values are skipped so another casing of the same key can match.
    """
    for key, value in provider_ids.items():
        if isinstance(key, str) and key.lower() == family and value not in (None, ""):
            return str(value)
    return None


def _strip_tt(value: str) -> str:
    return value.removeprefix("tt")


def matches_provider_ids(
    provider_ids: Mapping[str, Any] | None,
    *,
    imdb_id: str | None = None,
    tmdb_id: str | None = None,
    tvdb_id: str | None = None,
    anidb_id: str | None = None,
) -> bool:
    """True if any given target id matches the item's provider id map.

    IMDb compares with and without the ``tt`` prefix; TMDb, TVDB and
    AniDB require exact equality after stringification.
    """
    if not provider_ids:
        return False

    if imdb_id:
        stored = _value_for(provider_ids, "imdb")
        if stored:
            if stored == imdb_id:
                return True
            target_numeric = _strip_tt(imdb_id)
            if target_numeric and _strip_tt(stored) == target_numeric:
                return True

    for family, target in (("tmdb", tmdb_id), ("tvdb", tvdb_id), ("anidb", anidb_id)):
        if target and _value_for(provider_ids, family) == str(target):
            return True

    return False


def matches_normalized_id(
    provider_ids: Mapping[str, Any] | None, target: NormalizedId
) -> bool:
    """Shorthand for matching against every id carried by *target*."""
    return matches_provider_ids(
        provider_ids,
        imdb_id=target.imdb_id,
        tmdb_id=target.tmdb_id,
        tvdb_id=target.tvdb_id,
        anidb_id=target.anidb_id,
    )
