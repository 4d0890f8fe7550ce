"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streambridge",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "user_agent": "StreamBridge/1.1.2",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "stremio": {
        "addon_id": "org.streambridge.embyresolver",
        "addon_name": "StreamBridge: Emby to Stremio",
        "addon_version": "1.1.2",
        "default_stream_name": "Emby",
        "max_concurrent_requests": 4,
        "allow_private_hosts": False,
    },
    "media_server": {
        "default_kind": "emby",
        "device_id": "stremio-addon-device-id",
        "movie_query_limit": 10,
        "series_query_limit": 5,
    },
}
