"""Stream resolution exceptions."""

from __future__ import annotations


class StreamBridgeError(Exception):
    """Base class for all stream resolution errors."""


class MediaServerConfigError(StreamBridgeError):
    """Raised when server URL, user id or access token is missing."""


class CompositeIdError(StreamBridgeError):
    """Raised when a composite catalog id cannot be parsed."""


class UnsafeHostError(StreamBridgeError):
    """Raised when a server URL is malformed or points at a private address."""


class AddonConfigError(StreamBridgeError):
    """Raised when the addon config segment of a URL cannot be decoded."""
