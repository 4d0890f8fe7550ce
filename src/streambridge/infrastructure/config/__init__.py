from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, MediaServerConfig, StremioConfig

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "MediaServerConfig",
    "StremioConfig",
    "load_config",
]
