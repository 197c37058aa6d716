"""Canonical Pydantic models shared across all netresource modules.

**Configuration models** -- fixed at construction time:
    :class:`ContentKind`, :class:`RequestConfig`, and
    :class:`ResourceConfig`.

**Transport models** -- produced by a transport and consumed by the
accessor:
    :class:`FetchResponse`.

All models use Pydantic v2.  :class:`ResourceConfig` is frozen so that an
accessor's configuration cannot drift after construction.
"""

from __future__ import annotations

import codecs
import enum
from datetime import timedelta
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentKind(str, enum.Enum):
    """How the raw payload of a resource is turned into a value.

    ``TEXT`` decodes to a ``str``, ``LINES`` decodes to a ``list[str]``
    split on ``\\r?\\n``, and ``BINARY`` keeps the raw ``bytes``.
    """

    TEXT = "text"
    LINES = "lines"
    BINARY = "binary"


class RequestConfig(BaseModel):
    """HTTP settings applied to every request a transport issues."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    max_retries: int = Field(
        default=0, ge=0, description="Retries on connection errors and 5xx responses"
    )


class ResourceConfig(BaseModel):
    """Everything a :class:`~netresource.resource.NetworkResource` needs to know.

    ``cache_path`` must name a file whose parent directory already exists;
    nothing in the package creates it.  When ``max_age`` is ``None`` an
    existing cache file never expires and only ``force_reload`` refetches
    it.

    Example::

        ResourceConfig(
            source="https://example.com/events.json",
            cache_path="/var/lib/myapp/events.json",
            max_age=3600,
            headers={"Accept": "application/json"},
        )
    """

    model_config = ConfigDict(frozen=True)

    source: str = Field(description="URL of the remote resource")
    cache_path: Path = Field(description="File holding the cached copy")
    max_age: Optional[timedelta] = Field(
        default=None, description="Age after which the cached copy is refetched"
    )
    content_kind: ContentKind = ContentKind.TEXT
    encoding: str = Field(
        default="utf-8", description="Text encoding for text and lines kinds"
    )
    headers: Optional[dict[str, str]] = Field(
        default=None, description="Headers sent with every request"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)

    @field_validator("max_age")
    @classmethod
    def _non_negative_max_age(cls, value: Optional[timedelta]) -> Optional[timedelta]:
        if value is not None and value < timedelta(0):
            raise ValueError("max_age must not be negative")
        return value

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {value}") from exc
        return value


class FetchResponse(BaseModel):
    """Status code and raw body returned by a transport for one GET."""

    status_code: int
    content: bytes = b""

    @property
    def ok(self) -> bool:
        """Whether the response carries a usable body (HTTP 200)."""
        return self.status_code == 200
