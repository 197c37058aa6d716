"""Content decoding for each resource kind.

A :class:`ContentParser` pairs a decode function (raw payload bytes to a
value of type ``T``) with a flag saying whether the payload is binary.
One accessor type handles every kind; the parser is the only thing that
varies between a text, lines, binary, or custom resource.

Built-in parsers:

* :func:`text_parser` -- decode with a text encoding.
* :func:`lines_parser` -- decode, then split on ``\\r?\\n``.  No trailing
  empty line is dropped: ``"a\\n"`` decodes to ``["a", ""]``.
* :func:`binary_parser` -- the raw bytes, unchanged.
* :func:`custom_parser` -- any callable, e.g. ``json.loads``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from netresource.exceptions import DecodeError
from netresource.models import ContentKind

T = TypeVar("T")

_LINE_SEPARATOR = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ContentParser(Generic[T]):
    """Decode strategy for a resource payload.

    Attributes:
        decode: Callable turning the raw payload into the domain value.
        binary: Whether the payload is treated as opaque bytes rather
            than encoded text.
        name: Short label used in diagnostics.
    """

    decode: Callable[[bytes], T]
    binary: bool = False
    name: str = "custom"

    def parse(self, payload: bytes) -> T:
        """Decode *payload*, wrapping any failure in :class:`DecodeError`.

        Raises:
            DecodeError: If the decode function raises.
        """
        try:
            return self.decode(payload)
        except Exception as exc:
            raise DecodeError(f"Cannot decode {self.name} payload: {exc}") from exc


def text_parser(encoding: str = "utf-8") -> ContentParser[str]:
    """Decode the payload as text in *encoding*."""

    def decode(payload: bytes) -> str:
        return payload.decode(encoding)

    return ContentParser(decode=decode, name="text")


def lines_parser(encoding: str = "utf-8") -> ContentParser[list[str]]:
    """Decode the payload as text and split it into lines on ``\\r?\\n``."""

    def decode(payload: bytes) -> list[str]:
        return _LINE_SEPARATOR.split(payload.decode(encoding))

    return ContentParser(decode=decode, name="lines")


def binary_parser() -> ContentParser[bytes]:
    """Return the payload bytes unchanged."""
    return ContentParser(decode=bytes, binary=True, name="binary")


def custom_parser(
    decode: Callable[[bytes], T], binary: bool = True, name: str = "custom"
) -> ContentParser[T]:
    """Wrap an arbitrary decode function.

    Args:
        decode: Receives the raw payload bytes exactly as fetched or cached.
        binary: Whether the payload is opaque bytes.  Informational only.
        name: Label used in diagnostics.
    """
    return ContentParser(decode=decode, binary=binary, name=name)


def parser_for(kind: ContentKind, encoding: str = "utf-8") -> ContentParser[Any]:
    """Return the built-in parser for *kind*."""
    if kind == ContentKind.TEXT:
        return text_parser(encoding)
    if kind == ContentKind.LINES:
        return lines_parser(encoding)
    return binary_parser()
