"""netresource -- cache a remote resource on disk and keep serving it offline.

A :class:`~netresource.resource.NetworkResource` fetches a single URL over
HTTP, writes the raw response body to a cache file, and holds the decoded
value in memory.  :meth:`~netresource.resource.NetworkResource.get`
returns the in-memory value, the cached copy, or a fresh network copy --
in that order -- and falls back to the cached copy whenever the network
is unavailable.

Typical usage::

    from datetime import timedelta
    from netresource import text_resource

    events = text_resource(
        "https://example.com/events.json",
        cache_path="/var/lib/myapp/events.json",
        max_age=timedelta(minutes=60),
    )
    body = await events.get()                   # memory, cache, or network
    body = await events.get(force_reload=True)  # pull to refresh

Modules:
    resource: The accessor state machine and its factory functions.
    parsers: Content decoding for text, lines, binary, and custom kinds.
    transport: HTTP transports backed by :mod:`httpx`.
    store: Filesystem access for the cache file.
    models: Pydantic models shared across the package.
    config: Default storage location resolution.
    exceptions: Exception hierarchy.
    output: Diagnostics written to stderr.
"""

from netresource.models import ContentKind, FetchResponse, RequestConfig, ResourceConfig
from netresource.parsers import ContentParser
from netresource.resource import (
    NetworkResource,
    binary_resource,
    json_resource,
    lines_resource,
    text_resource,
)

__version__ = "0.1.0"

__all__ = [
    "ContentKind",
    "ContentParser",
    "FetchResponse",
    "NetworkResource",
    "RequestConfig",
    "ResourceConfig",
    "binary_resource",
    "json_resource",
    "lines_resource",
    "text_resource",
]
