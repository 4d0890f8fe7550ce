"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
ServerKind = Literal["emby", "jellyfin"]


class StremioConfig(BaseModel):
    """Stremio addon identity and stream resolution limits.

    All values configurable via YAML (stremio section) or ENV vars.
    """

    addon_id: str = Field(
        default="org.streambridge.embyresolver",
        description="Manifest id. Configured manifests append a config suffix.",
    )
    addon_name: str = Field(
        default="StreamBridge: Emby to Stremio",
        description="Manifest display name.",
    )
    addon_version: str = Field(
        default="1.1.2",
        description="Manifest version string.",
    )
    default_stream_name: str = Field(
        default="Emby",
        description="Stream name shown in Stremio when the user sets none.",
    )
    max_concurrent_requests: int = Field(
        default=4,
        description="Max parallel per-series / per-item lookups while resolving.",
    )
    allow_private_hosts: bool = Field(
        default=False,
        description="Skip the public-host check (self-hosted LAN setups).",
    )

    @field_validator("max_concurrent_requests")
    @classmethod
    def _validate_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_concurrent_requests must be >= 1")
        return v


class MediaServerConfig(BaseModel):
    """Emby/Jellyfin request shaping."""

    default_kind: ServerKind = Field(
        default="emby",
        description="Server flavour assumed when the addon config names none.",
    )
    device_id: str = Field(
        default="stremio-addon-device-id",
        description="DeviceId sent with direct-play stream URLs.",
    )
    movie_query_limit: int = Field(
        default=10,
        description="Limit for movie catalog queries.",
    )
    series_query_limit: int = Field(
        default=5,
        description="Limit for series catalog queries.",
    )

    @field_validator("movie_query_limit", "series_query_limit")
    @classmethod
    def _validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("query limits must be >= 1")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/stremio/media_server).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="streambridge", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout in seconds for media server requests.",
    )
    http_user_agent: str = Field(
        default="StreamBridge/1.1.2",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    stremio: StremioConfig = Field(default_factory=StremioConfig)
    media_server: MediaServerConfig = Field(default_factory=MediaServerConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "stremio": self.stremio.model_dump(),
            "media_server": self.media_server.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read STREAMBRIDGE_* variables,
    converts to dict of set values, merges into YAML/defaults,
    then validates AppConfig.

    Supported env var examples (flat, explicit):
    - STREAMBRIDGE_HTTP_TIMEOUT_SECONDS
    - STREAMBRIDGE_LOG_LEVEL
    - STREAMBRIDGE_MAX_CONCURRENT_REQUESTS
    - STREAMBRIDGE_ALLOW_PRIVATE_HOSTS
    - STREAMBRIDGE_MEDIA_SERVER_KIND
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMBRIDGE_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    default_stream_name: Optional[str] = None
    max_concurrent_requests: Optional[int] = None
    allow_private_hosts: Optional[bool] = None

    media_server_kind: Optional[ServerKind] = None
    device_id: Optional[str] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
