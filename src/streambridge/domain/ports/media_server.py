"""Port for media server (Emby/Jellyfin) HTTP access."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from streambridge.domain.entities.media import ServerConfig


@runtime_checkable
class MediaServerPort(Protocol):
    """Async GET against a media server API.

    Implementations never raise on transport or HTTP errors; they return
    ``None`` so callers can move on to the next lookup strategy.
    """

    async def get_json(
        self,
        server: ServerConfig,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """GET ``{server_url}{path}`` and return the parsed JSON object or None."""
        ...
