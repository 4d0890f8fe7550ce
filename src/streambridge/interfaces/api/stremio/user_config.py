"""Per-user addon configuration carried in the URL path.

Stremio installs the addon from ``/{cfg}/manifest.json`` where ``cfg`` is
base64url-encoded JSON. Older installs omit the newer optional keys, so
every optional key has a default.
"""

from __future__ import annotations

import base64
import json
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from streambridge.domain.entities.media import MediaServerKind, ServerConfig
from streambridge.domain.exceptions import AddonConfigError


class AddonUserConfig(BaseModel):
    """Decoded addon config segment."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    server_url: str = Field(default="", alias="serverUrl")
    user_id: str = Field(default="", alias="userId")
    access_token: str = Field(default="", alias="accessToken")
    server_type: Optional[MediaServerKind] = Field(default=None, alias="serverType")
    stream_name: Optional[str] = Field(default=None, alias="streamName")
    show_server_name: bool = Field(default=False, alias="showServerName")
    hide_stream_types: list[str] = Field(default_factory=list, alias="hideStreamTypes")

    @field_validator("show_server_name", mode="before")
    @classmethod
    def _null_show_server_name(cls, v: object) -> object:
        return False if v is None else v

    @field_validator("hide_stream_types", mode="before")
    @classmethod
    def _null_hide_stream_types(cls, v: object) -> object:
        return [] if v is None else v

    def is_complete(self) -> bool:
        return bool(self.server_url and self.user_id and self.access_token)

    def to_server_config(self, default_kind: MediaServerKind) -> ServerConfig:
        return ServerConfig(
            server_url=self.server_url,
            user_id=self.user_id,
            access_token=self.access_token,
            kind=self.server_type or default_kind,
        )


def encode_addon_config(config: AddonUserConfig) -> str:
    """Inverse of decode_addon_config (unpadded base64url)."""
    raw = json.dumps(config.model_dump(by_alias=True, exclude_none=True))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_addon_config(segment: str) -> AddonUserConfig:
    """Decode a base64url JSON config segment.

    Raises:
        AddonConfigError: Not base64url, not JSON, or the wrong shape.
    """
    padded = segment + "=" * (-len(segment) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        return AddonUserConfig.model_validate(json.loads(raw.decode("utf-8")))
    except ValueError as exc:
        raise AddonConfigError(f"Bad config in URL: {exc}") from exc
