from .media import (
    ContentKind,
    ItemType,
    MediaServerKind,
    MediaSource,
    MediaStream,
    NormalizedId,
    RemoteItem,
    ServerConfig,
    StreamDescriptor,
    StreamType,
    SubtitleDescriptor,
    TechnicalProfile,
)

__all__ = [
    "ContentKind",
    "ItemType",
    "MediaServerKind",
    "MediaSource",
    "MediaStream",
    "NormalizedId",
    "RemoteItem",
    "ServerConfig",
    "StreamDescriptor",
    "StreamType",
    "SubtitleDescriptor",
    "TechnicalProfile",
]
