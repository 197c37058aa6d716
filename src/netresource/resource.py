"""The resource accessor: memory, then cache, then network.

:class:`NetworkResource` holds the configuration for one remote resource
and the last value it successfully obtained.  Each call to
:meth:`~NetworkResource.get` decides where the value comes from:

1. The in-memory value, if one is held and no reload is forced.  No I/O.
2. The network, if a reload is forced or the cache file is expired.  A
   successful fetch is written through to the cache file; a failed one
   falls back to the cache file.
3. Otherwise the cache file.

Network and cache failures never raise out of the retrieval methods.
They are reported on stderr through :mod:`netresource.output` and turn
into cache fallback or ``None``.

The accessor assumes one retrieval in flight at a time.  Overlapping
calls on the same instance may each hit the network, and the last write
to the cache file wins.

Example::

    from datetime import timedelta
    from netresource import lines_resource

    stops = lines_resource(
        "https://example.com/stops.txt",
        filename="stops.txt",
        max_age=timedelta(hours=12),
    )
    for line in await stops.get() or []:
        ...
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Generic, Optional, TypeVar

from netresource.config import StorageLocator, cache_path_for
from netresource.exceptions import CacheError, ConfigError, DecodeError
from netresource.models import ContentKind, RequestConfig, ResourceConfig
from netresource.output import get_output
from netresource.parsers import ContentParser, custom_parser, parser_for
from netresource.store import FileStore, Store
from netresource.transport import OneShotTransport, Transport

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NetworkResource(Generic[T]):
    """Fetch one remote resource, cache it in a file, and hold it in memory.

    Args:
        config: Source URL, cache path, expiry, content kind, and headers.
        parser: Decode strategy.  Defaults to the built-in parser for
            ``config.content_kind``.
        transport: Network client.  When ``None``, a
            :class:`~netresource.transport.OneShotTransport` opens a fresh
            HTTP client for every request.
        store: Filesystem access.  Defaults to
            :class:`~netresource.store.FileStore`.
        clock: Returns the current time as an aware datetime.  Used by
            the expiry check.
    """

    def __init__(
        self,
        config: ResourceConfig,
        parser: Optional[ContentParser[T]] = None,
        transport: Optional[Transport] = None,
        store: Optional[Store] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._config = config
        self._parser: ContentParser[T] = parser or parser_for(
            config.content_kind, config.encoding
        )
        self._transport: Transport = transport or OneShotTransport(config.request)
        self._store: Store = store or FileStore()
        self._clock = clock or _utcnow
        self._data: Optional[T] = None

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def config(self) -> ResourceConfig:
        return self._config

    @property
    def cache_path(self) -> Path:
        """The file holding the cached copy."""
        return self._config.cache_path

    @property
    def data(self) -> Optional[T]:
        """The value currently held in memory, or ``None``.  Never performs I/O."""
        return self._data

    # ------------------------------------------------------------------ #
    # Cache state
    # ------------------------------------------------------------------ #

    async def is_cached(self) -> bool:
        """Whether the cache file exists.  A path that cannot be checked is not cached."""
        try:
            return await self._store.exists(self.cache_path)
        except CacheError as exc:
            get_output().warning(str(exc))
            return False

    async def is_expired(self) -> bool:
        """Whether the cached copy must be refreshed from the network.

        A missing file is expired.  An existing file with no ``max_age``
        configured never expires.  Otherwise the file is expired when its
        age is strictly greater than ``max_age``; a file exactly
        ``max_age`` old is still fresh.  A file whose existence or
        modification time cannot be checked is treated as expired.
        """
        try:
            if not await self._store.exists(self.cache_path):
                return True
            if self._config.max_age is None:
                return False
            modified = await self._store.last_modified(self.cache_path)
        except CacheError as exc:
            get_output().warning(str(exc))
            return True
        return self._clock() - modified > self._config.max_age

    # ------------------------------------------------------------------ #
    # Retrieval
    # ------------------------------------------------------------------ #

    async def get(self, force_reload: bool = False) -> Optional[T]:
        """Return the value from memory, cache, or network -- in that order.

        Args:
            force_reload: Skip the in-memory value and the freshness check
                and go to the network (falling back to the cache).

        Returns:
            The decoded value, or ``None`` when neither the network nor
            the cache could supply one.
        """
        if self._data is not None and not force_reload:
            return self._data

        output = get_output()
        if force_reload or await self.is_expired():
            output.debug(f"{self._label}: Fetching from {self._config.source}")
            value = await self.get_from_network()
        else:
            output.debug(f"Loading cached copy of {self._label}")
            value = await self.get_from_cache()

        self._remember(value)
        return value

    async def get_from_network(self, use_cache_fallback: bool = True) -> Optional[T]:
        """Fetch the resource and write it through to the cache file.

        On success the raw response body is written to the cache file
        exactly as received, the held value is updated, and the decoded
        value is returned.  A cache write failure is reported but does
        not prevent the value from being returned.

        On failure -- a non-200 status, a transport error, or a body that
        does not decode -- the cache file is left untouched.

        Args:
            use_cache_fallback: On failure, return :meth:`get_from_cache`
                instead of ``None``.

        Returns:
            The decoded value, the cached value on fallback, or ``None``.
        """
        output = get_output()
        source = self._config.source
        output.debug(f"GET {source}")

        try:
            response = await self._transport.get(source, headers=self._config.headers)
        except Exception as exc:
            output.warning(f"{source} Fetch failed: {exc}")
            return await self._fallback(use_cache_fallback)

        if not response.ok:
            output.warning(f"{source} Fetch failed ({response.status_code}).")
            return await self._fallback(use_cache_fallback)

        try:
            value = self._parser.parse(response.content)
        except DecodeError as exc:
            output.warning(f"{source} {exc}")
            return await self._fallback(use_cache_fallback)

        try:
            await self._store.write_bytes(self.cache_path, response.content)
        except CacheError as exc:
            output.warning(f"{source} Fetched, but the cache was not updated: {exc}")
        else:
            output.info(f"{source} Fetched. Cache updated.")

        self._remember(value)
        return value

    async def get_from_cache(self) -> Optional[T]:
        """Read and decode the cache file.

        Returns:
            The decoded value, or ``None`` if the file does not exist,
            cannot be read, or does not decode.
        """
        path = self.cache_path
        try:
            if not await self._store.exists(path):
                return None
            payload = await self._store.read_bytes(path)
            return self._parser.parse(payload)
        except (CacheError, DecodeError) as exc:
            get_output().warning(f"Ignoring cached copy of {self._label}: {exc}")
            return None

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    @property
    def _label(self) -> str:
        return self.cache_path.name

    def _remember(self, value: Optional[T]) -> None:
        # A failed retrieval never clears a value obtained earlier.
        if value is not None:
            self._data = value

    async def _fallback(self, use_cache_fallback: bool) -> Optional[T]:
        output = get_output()
        if not use_cache_fallback:
            output.debug("Not attempting to find in cache.")
            return None
        output.info(f"{self._config.source} Using a cached copy if available.")
        return await self.get_from_cache()


# ------------------------------------------------------------------ #
# Factories
# ------------------------------------------------------------------ #


def _build_config(
    source: str,
    kind: ContentKind,
    cache_path: Optional[str | Path],
    filename: Optional[str],
    directory: Optional[str | Path],
    locator: Optional[StorageLocator],
    max_age: Optional[timedelta],
    encoding: str,
    headers: Optional[dict[str, str]],
    request: Optional[RequestConfig],
) -> ResourceConfig:
    if filename is not None:
        if cache_path is not None:
            raise ConfigError("Pass exactly one of cache_path or filename")
        cache_path = cache_path_for(filename, directory=directory, locator=locator)
    elif cache_path is None:
        raise ConfigError("Pass exactly one of cache_path or filename")
    return ResourceConfig(
        source=source,
        cache_path=Path(cache_path),
        max_age=max_age,
        content_kind=kind,
        encoding=encoding,
        headers=headers,
        request=request or RequestConfig(),
    )


def text_resource(
    source: str,
    cache_path: Optional[str | Path] = None,
    *,
    filename: Optional[str] = None,
    directory: Optional[str | Path] = None,
    locator: Optional[StorageLocator] = None,
    max_age: Optional[timedelta] = None,
    encoding: str = "utf-8",
    headers: Optional[dict[str, str]] = None,
    request: Optional[RequestConfig] = None,
    transport: Optional[Transport] = None,
    store: Optional[Store] = None,
) -> NetworkResource[str]:
    """Build a resource whose value is the decoded body text.

    Give either *cache_path*, or *filename* plus an optional *directory*
    (falling back to *locator*, then the XDG data directory).

    Raises:
        ConfigError: If both or neither of *cache_path* and *filename*
            are given, or the directory cannot be resolved.
    """
    config = _build_config(
        source, ContentKind.TEXT, cache_path, filename, directory, locator,
        max_age, encoding, headers, request,
    )
    return NetworkResource(config, transport=transport, store=store)


def lines_resource(
    source: str,
    cache_path: Optional[str | Path] = None,
    *,
    filename: Optional[str] = None,
    directory: Optional[str | Path] = None,
    locator: Optional[StorageLocator] = None,
    max_age: Optional[timedelta] = None,
    encoding: str = "utf-8",
    headers: Optional[dict[str, str]] = None,
    request: Optional[RequestConfig] = None,
    transport: Optional[Transport] = None,
    store: Optional[Store] = None,
) -> NetworkResource[list[str]]:
    """Build a resource whose value is the body text split into lines.

    Lines are split on ``\\r?\\n`` with no post-filtering, so a body
    ending in a newline yields a trailing empty string.
    """
    config = _build_config(
        source, ContentKind.LINES, cache_path, filename, directory, locator,
        max_age, encoding, headers, request,
    )
    return NetworkResource(config, transport=transport, store=store)


def binary_resource(
    source: str,
    cache_path: Optional[str | Path] = None,
    *,
    filename: Optional[str] = None,
    directory: Optional[str | Path] = None,
    locator: Optional[StorageLocator] = None,
    max_age: Optional[timedelta] = None,
    headers: Optional[dict[str, str]] = None,
    request: Optional[RequestConfig] = None,
    transport: Optional[Transport] = None,
    store: Optional[Store] = None,
) -> NetworkResource[bytes]:
    """Build a resource whose value is the raw body bytes."""
    config = _build_config(
        source, ContentKind.BINARY, cache_path, filename, directory, locator,
        max_age, "utf-8", headers, request,
    )
    return NetworkResource(config, transport=transport, store=store)


def json_resource(
    source: str,
    cache_path: Optional[str | Path] = None,
    *,
    filename: Optional[str] = None,
    directory: Optional[str | Path] = None,
    locator: Optional[StorageLocator] = None,
    max_age: Optional[timedelta] = None,
    encoding: str = "utf-8",
    headers: Optional[dict[str, str]] = None,
    request: Optional[RequestConfig] = None,
    transport: Optional[Transport] = None,
    store: Optional[Store] = None,
) -> NetworkResource[Any]:
    """Build a resource whose value is the body parsed as JSON.

    The cache file holds the raw body, so a later cache read parses the
    same document a network fetch would have.  A body that is not valid
    JSON counts as a failed fetch and is never cached.
    """
    config = _build_config(
        source, ContentKind.TEXT, cache_path, filename, directory, locator,
        max_age, encoding, headers, request,
    )

    def decode(payload: bytes) -> Any:
        return json.loads(payload.decode(encoding))

    parser = custom_parser(decode, binary=False, name="json")
    return NetworkResource(config, parser=parser, transport=transport, store=store)
