"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from streambridge.infrastructure.config import AppConfig
from streambridge.interfaces.app_state import AppState
from streambridge.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

# First path segment is the user's encoded config (credentials) on addon routes.
_PUBLIC_ROOTS = frozenset({"", "manifest.json", "healthz", "docs", "openapi.json"})


def loggable_path(path: str) -> str:
    """Replace the encoded config segment of an addon path with ``[CONFIG]``."""
    head, sep, rest = path.lstrip("/").partition("/")
    if head in _PUBLIC_ROOTS and not sep:
        return path
    return f"/[CONFIG]{sep}{rest}"


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, use case) are created in lifespan().
    """
    app = FastAPI(
        title="StreamBridge",
        description="Emby/Jellyfin direct-play streams for Stremio",
        version=config.stremio.addon_version,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from streambridge.interfaces.api.stremio.router import router as stremio_router

    app.include_router(stremio_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                path=loggable_path(request.url.path),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
