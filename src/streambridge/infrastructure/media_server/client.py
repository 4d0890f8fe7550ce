"""Emby/Jellyfin API client backed by an async httpx client."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from streambridge.domain.entities.media import MediaServerKind, ServerConfig

log = structlog.get_logger(__name__)

_TOKEN_HEADERS: dict[MediaServerKind, str] = {
    "emby": "X-Emby-Token",
    "jellyfin": "X-MediaBrowser-Token",
}

# Logged in place of the server URL: host, port, path and userinfo of a
# user's server never reach the log.
REDACTED_SERVER = "[SERVER]"

# Query params that identify the user and never go into logs.
_SENSITIVE_PARAMS = frozenset({"UserId", "api_key"})


def _loggable_params(params: dict[str, Any] | None) -> dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if k not in _SENSITIVE_PARAMS}


class HttpxMediaServerClient:
    """Async media server client using a shared httpx.AsyncClient.

    Implements ``MediaServerPort`` from domain.ports.media_server.
    """

    def __init__(self, *, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    @staticmethod
    def _headers(server: ServerConfig) -> dict[str, str]:
        header = _TOKEN_HEADERS.get(server.kind, _TOKEN_HEADERS["emby"])
        return {header: server.access_token, "Accept": "application/json"}

    async def get_json(
        self,
        server: ServerConfig,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        url = f"{server.base_url}{path}"
        try:
            resp = await self._http.get(
                url, params=params, headers=self._headers(server)
            )
            if resp.status_code == 401:
                log.warning(
                    "media_server_unauthorized",
                    server=REDACTED_SERVER,
                    path=path,
                    hint="access token might be invalid or expired",
                )
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            log.warning(
                "media_server_http_error",
                server=REDACTED_SERVER,
                path=path,
                params=_loggable_params(params),
                status=exc.response.status_code,
            )
            return None
        except httpx.HTTPError as exc:
            log.warning(
                "media_server_network_error",
                server=REDACTED_SERVER,
                path=path,
                params=_loggable_params(params),
                error=type(exc).__name__,
            )
            return None
        except ValueError:
            log.warning(
                "media_server_invalid_json",
                server=REDACTED_SERVER,
                path=path,
            )
            return None

        if not isinstance(data, dict):
            log.warning(
                "media_server_unexpected_payload",
                path=path,
                payload_type=type(data).__name__,
            )
            return None
        return data
