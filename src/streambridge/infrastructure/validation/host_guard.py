"""Public-host check for user-supplied media server URLs.

The addon fetches whatever server URL the user configured, so the URL
must not point at loopback, link-local or private networks.
"""

from __future__ import annotations

import asyncio
import socket
from collections.abc import Awaitable, Callable
from ipaddress import IPv6Address, ip_address
from urllib.parse import urlsplit

import structlog

from streambridge.domain.exceptions import UnsafeHostError

log = structlog.get_logger(__name__)

_ALLOWED_SCHEMES = ("http", "https")

Resolver = Callable[[str], Awaitable[list[str]]]


def is_private_ip(ip_str: str) -> bool:
    """True for non-public addresses. Non-IP strings are not private."""
    try:
        ip = ip_address(ip_str.strip("[]"))
    except ValueError:
        return False
    if isinstance(ip, IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_unspecified
        or ip.is_reserved
        or ip.is_multicast
    )


async def resolve_host(hostname: str) -> list[str]:
    """All A/AAAA addresses for *hostname*; empty when it does not resolve."""
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError):
        # UnicodeError: idna rejects empty or over-long labels
        return []
    return list(dict.fromkeys(str(info[4][0]) for info in infos))


async def assert_public_host(url: str, *, resolve: Resolver = resolve_host) -> None:
    """Raise UnsafeHostError unless *url* is http(s) on a public host.

    Checks, in order: scheme, hostname presence, literal IP, then every
    address the hostname resolves to. A hostname that does not resolve
    is refused.
    """
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError as exc:
        raise UnsafeHostError("Invalid URL format") from exc

    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise UnsafeHostError("URL must use http or https protocol")
    if not hostname:
        raise UnsafeHostError("Invalid hostname")
    if is_private_ip(hostname):
        raise UnsafeHostError("Private or local IP addresses are not allowed")

    addresses = await resolve(hostname)
    if not addresses:
        raise UnsafeHostError("Could not resolve hostname to verify IP safety")
    for address in addresses:
        if is_private_ip(address):
            log.warning("host_resolves_private", address_count=len(addresses))
            raise UnsafeHostError("Hostname resolves to a private or local IP")
