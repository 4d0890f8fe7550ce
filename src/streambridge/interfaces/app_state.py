"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from streambridge.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from streambridge.application.use_cases.stream_resolve import (
        StreamResolveUseCase,
    )
    from streambridge.domain.ports import MediaServerPort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Domain Ports
    media_server: MediaServerPort

    # Application Services
    stream_resolve_uc: StreamResolveUseCase
