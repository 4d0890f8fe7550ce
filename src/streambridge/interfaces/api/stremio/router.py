"""Stremio addon API endpoints (manifest, stream)."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from streambridge.domain.exceptions import AddonConfigError, UnsafeHostError
from streambridge.infrastructure.validation.host_guard import assert_public_host
from streambridge.interfaces.api.stremio.presenter import (
    CORS_HEADERS,
    build_configured_manifest,
    build_manifest,
    present_streams,
)
from streambridge.interfaces.api.stremio.user_config import decode_addon_config
from streambridge.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["stremio"])

_CONTENT_TYPES = ("movie", "series")


def _empty_streams() -> JSONResponse:
    return JSONResponse(content={"streams": []}, headers=CORS_HEADERS)


@router.get("/manifest.json")
async def stremio_manifest(request: Request) -> JSONResponse:
    """Serve the unconfigured manifest (Stremio shows its config form)."""
    state = cast(AppState, request.app.state)
    return JSONResponse(
        content=build_manifest(state.config.stremio), headers=CORS_HEADERS
    )


@router.get("/{cfg}/manifest.json")
async def stremio_configured_manifest(request: Request, cfg: str) -> JSONResponse:
    """Serve the manifest for one installed user config."""
    state = cast(AppState, request.app.state)
    try:
        user = decode_addon_config(cfg)
    except AddonConfigError as exc:
        log.warning("addon_config_invalid", route="manifest", reason=str(exc))
        return JSONResponse(
            content={"err": "Bad config in URL", "details": str(exc)},
            status_code=400,
            headers=CORS_HEADERS,
        )

    return JSONResponse(
        content=build_configured_manifest(state.config.stremio, user, cfg),
        headers=CORS_HEADERS,
    )


@router.get("/{cfg}/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    cfg: str,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """Resolve direct-play streams for a movie or episode id."""
    state = cast(AppState, request.app.state)

    try:
        user = decode_addon_config(cfg)
    except AddonConfigError as exc:
        log.warning("addon_config_invalid", route="stream", reason=str(exc))
        return _empty_streams()

    if content_type not in _CONTENT_TYPES:
        log.info("stremio_unsupported_type", content_type=content_type)
        return _empty_streams()

    if not user.is_complete():
        log.warning("addon_config_incomplete", stream_id=stream_id)
        return _empty_streams()

    if not state.config.stremio.allow_private_hosts:
        try:
            await assert_public_host(user.server_url)
        except UnsafeHostError as exc:
            log.warning("media_server_host_rejected", reason=str(exc))
            return _empty_streams()

    server = user.to_server_config(state.config.media_server.default_kind)
    resolved = await state.stream_resolve_uc.execute(stream_id, server)
    streams = present_streams(
        resolved, user, state.config.stremio.default_stream_name
    )

    log.info(
        "stremio_stream_served",
        content_type=content_type,
        stream_id=stream_id,
        resolved=len(resolved),
        served=len(streams),
    )
    return JSONResponse(content={"streams": streams}, headers=CORS_HEADERS)
