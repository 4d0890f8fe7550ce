"""Composite catalog id parsing.

Accepted forms::

    tt1234567              IMDb movie
    tmdb123 / tvdb42 / anidb7
    imdb:1234567           normalized to tt1234567
    tmdb:123 / tvdb:42 / anidb:7
    tt0903747:1:2          episode (season 1, episode 2)

Pure logic, no I/O.
"""

from __future__ import annotations

import re

import structlog

from streambridge.domain.entities.media import ContentKind, NormalizedId
from streambridge.domain.exceptions import CompositeIdError

log = structlog.get_logger(__name__)

_PREFIXED_SEGMENT_PREFIXES = frozenset({"tmdb", "imdb", "tvdb", "anidb"})

_BARE_ID_RE = re.compile(r"^(tt|tmdb|tvdb|anidb)([A-Za-z0-9]+)$")
_NUMBER_RE = re.compile(r"^\d+$")


def _ids_from_base(base_id: str) -> dict[str, str]:
    """Split a bare id like ``tmdb123`` into its provider field."""
    m = _BARE_ID_RE.match(base_id)
    if m is None:
        raise CompositeIdError(
            f"Unsupported base id {base_id!r} (expected tt..., tmdb..., "
            "tvdb... or anidb...)"
        )
    prefix, tail = m.group(1), m.group(2)
    if prefix == "tt":
        return {"imdb_id": base_id}
    return {f"{prefix}_id": tail}


def _normalize_prefixed(prefix: str, value: str) -> str:
    """Turn ``prefix:value`` into the equivalent bare id."""
    prefix = prefix.lower()
    if prefix not in _PREFIXED_SEGMENT_PREFIXES:
        raise CompositeIdError(f"Unsupported id prefix {prefix!r}")
    if not value:
        raise CompositeIdError(f"Missing {prefix.upper()} id value")
    if prefix == "imdb":
        return value if value.startswith("tt") else f"tt{value}"
    return f"{prefix}{value}"


def parse_composite_id_strict(composite_id: str) -> NormalizedId:
    """Parse a composite id, raising CompositeIdError on any malformation."""
    if not composite_id:
        raise CompositeIdError("Empty id")

    parts = composite_id.split(":")

    if len(parts) == 1:
        base_id = parts[0]
        return NormalizedId(base_id=base_id, **_ids_from_base(base_id))

    if len(parts) == 2:
        base_id = _normalize_prefixed(parts[0], parts[1])
        return NormalizedId(base_id=base_id, **_ids_from_base(base_id))

    if len(parts) == 3:
        base_id, raw_season, raw_episode = parts
        if not (_NUMBER_RE.match(raw_season) and _NUMBER_RE.match(raw_episode)):
            raise CompositeIdError(
                f"Invalid season/episode in {composite_id!r}"
            )
        return NormalizedId(
            base_id=base_id,
            content_kind=ContentKind.EPISODE,
            season=int(raw_season),
            episode=int(raw_episode),
            **_ids_from_base(base_id),
        )

    raise CompositeIdError(
        f"Unexpected id format {composite_id!r} ({len(parts)} segments)"
    )


def parse_composite_id(composite_id: str) -> NormalizedId | None:
    """Parse a composite id. Returns None (and logs why) on failure."""
    try:
        return parse_composite_id_strict(composite_id)
    except CompositeIdError as exc:
        log.warning("composite_id_invalid", composite_id=composite_id, reason=str(exc))
        return None
