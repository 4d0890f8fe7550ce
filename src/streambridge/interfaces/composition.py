"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from streambridge.application.use_cases.stream_resolve import StreamResolveUseCase
from streambridge.infrastructure.config.schema import AppConfig
from streambridge.infrastructure.media_server.client import HttpxMediaServerClient
from streambridge.infrastructure.media_server.item_resolver import ItemResolver
from streambridge.infrastructure.stremio.stream_assembler import StreamAssembler
from streambridge.infrastructure.stremio.stream_sorter import StreamSorter
from streambridge.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_stream_resolve_use_case(
    config: AppConfig, media_server: HttpxMediaServerClient
) -> StreamResolveUseCase:
    """Wire the resolution pipeline around one media server client."""
    return StreamResolveUseCase(
        media_server=media_server,
        resolver=ItemResolver(
            media_server=media_server,
            movie_query_limit=config.media_server.movie_query_limit,
            series_query_limit=config.media_server.series_query_limit,
        ),
        assembler=StreamAssembler(device_id=config.media_server.device_id),
        sorter=StreamSorter(),
        config=config.stremio,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: initialize and clean up all resources.

    Order:
        1. HTTP client (shared by every media server request)
        2. Media server client
        3. Stream resolve use case
    """
    state = cast(AppState, app.state)
    config = state.config

    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": config.http_user_agent},
    )
    log.info(
        "http_client_initialized",
        timeout_seconds=config.http_timeout_seconds,
    )

    state.media_server = HttpxMediaServerClient(http_client=state.http_client)
    state.stream_resolve_uc = build_stream_resolve_use_case(
        config, state.media_server
    )
    log.info(
        "stream_resolver_ready",
        default_kind=config.media_server.default_kind,
        max_concurrent_requests=config.stremio.max_concurrent_requests,
        allow_private_hosts=config.stremio.allow_private_hosts,
    )

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")
