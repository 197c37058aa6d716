"""HTTP transports backed by :mod:`httpx`.

A transport performs one GET and reports the status code and the raw
body bytes.  Any HTTP status, including errors, comes back as a
:class:`~netresource.models.FetchResponse`; only network-level failures
(connect, timeout, protocol) raise :class:`~netresource.exceptions.TransportError`.

Classes:
    :class:`OneShotTransport` -- opens a fresh :class:`httpx.AsyncClient`
    for every request.  The default when a resource has no transport.
    :class:`HttpTransport` -- reuses one :class:`httpx.AsyncClient`,
    recommended when frequently hitting the same server.  Must be used as
    an async context manager unless a client is supplied.

Both honour :class:`~netresource.models.RequestConfig`: timeout, SSL
verification, redirects, and retry with exponential backoff.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol, runtime_checkable

import httpx

from netresource.exceptions import TransportError
from netresource.models import FetchResponse, RequestConfig
from netresource.output import get_output


@runtime_checkable
class Transport(Protocol):
    """Performs a single GET request."""

    async def get(
        self, url: str, headers: Optional[dict[str, str]] = None
    ) -> FetchResponse: ...


class OneShotTransport:
    """Open a new :class:`httpx.AsyncClient` per request and close it afterwards.

    Args:
        config: Timeout, SSL, redirect, and retry settings.
        mount: Optional :class:`httpx.AsyncBaseTransport` handed to every
            client it opens (e.g. :class:`httpx.MockTransport` in tests).
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        mount: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._mount = mount

    async def get(
        self, url: str, headers: Optional[dict[str, str]] = None
    ) -> FetchResponse:
        async with _build_client(self._config, self._mount) as client:
            return await _get_with_retry(client, url, headers, self._config)


class HttpTransport:
    """Connection-reusing transport over a single :class:`httpx.AsyncClient`.

    Args:
        config: Timeout, SSL, redirect, and retry settings.
        client: An existing client to use.  When given, the caller owns
            it and it is not closed on exit.

    Example::

        async with HttpTransport() as transport:
            resource = text_resource(url, cache_path=path, transport=transport)
            text = await resource.get()
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._client = client
        self._owns_client = client is None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpTransport:
        if self._client is None:
            self._client = _build_client(self._config)
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport opened it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get(
        self, url: str, headers: Optional[dict[str, str]] = None
    ) -> FetchResponse:
        """Send a GET request on the shared client.

        Raises:
            TransportError: On network / timeout errors after all retries.
        """
        assert self._client is not None, "Transport not initialised -- use as async context manager"
        return await _get_with_retry(self._client, url, headers, self._config)


# ------------------------------------------------------------------ #
# Private helpers
# ------------------------------------------------------------------ #


def _build_client(
    config: RequestConfig, mount: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=config.timeout,
        verify=config.verify_ssl,
        follow_redirects=config.follow_redirects,
        transport=mount,
    )


async def _get_with_retry(
    client: httpx.AsyncClient,
    url: str,
    headers: Optional[dict[str, str]],
    config: RequestConfig,
) -> FetchResponse:
    """Execute the GET with exponential-backoff retry.

    Retries on 5xx status codes and transport errors up to
    ``max_retries`` times using :func:`asyncio.sleep` between attempts.
    The delay doubles each attempt: 1 s, 2 s, 4 s, ...
    """
    max_retries = config.max_retries
    output = get_output()

    for attempt in range(max_retries + 1):
        try:
            response = await client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            if attempt < max_retries:
                delay = 2 ** attempt
                output.debug(
                    f"Connection error: {exc}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                await asyncio.sleep(delay)
                continue
            raise TransportError(
                f"GET {url} failed after {max_retries + 1} attempts: {exc}", url
            ) from exc

        if response.status_code >= 500 and attempt < max_retries:
            delay = 2 ** attempt
            output.debug(
                f"Server error {response.status_code}, retrying in {delay}s "
                f"(attempt {attempt + 1}/{max_retries})"
            )
            await asyncio.sleep(delay)
            continue

        return FetchResponse(status_code=response.status_code, content=response.content)

    raise TransportError(f"GET {url} failed after all retries", url)  # pragma: no cover
