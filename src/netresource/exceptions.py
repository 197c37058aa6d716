"""Exception hierarchy for netresource.

All exceptions inherit from :class:`NetResourceError`.  Transports, the
cache store, and the content parsers raise these; the accessor in
:mod:`netresource.resource` catches them on its retrieval paths and turns
them into cache fallback or absence, so callers of
:meth:`~netresource.resource.NetworkResource.get` never see them.

Subclass hierarchy::

    NetResourceError
    +-- ConfigError
    +-- TransportError
    +-- DecodeError
    +-- CacheError
        +-- CacheReadError
        +-- CacheWriteError
"""

from __future__ import annotations

from pathlib import Path


class NetResourceError(Exception):
    """Base exception for all netresource errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)


class ConfigError(NetResourceError):
    """Raised for configuration problems (unresolvable storage directory, bad paths)."""


class TransportError(NetResourceError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Distinct from an HTTP error status: a transport that received any
    response returns it instead of raising.

    Args:
        message: Human-readable error description.
        url: The URL that was being fetched.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class DecodeError(NetResourceError):
    """Raised when a payload cannot be decoded for the resource's content kind."""


class CacheError(NetResourceError):
    """Base class for cache file failures.

    Args:
        message: Human-readable error description.
        path: The cache file involved.
    """

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class CacheReadError(CacheError):
    """Raised when an existing cache file cannot be read."""


class CacheWriteError(CacheError):
    """Raised when the cache file cannot be created or overwritten."""
