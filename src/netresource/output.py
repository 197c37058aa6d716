"""Diagnostics for fetches, fallbacks, and cache writes.

The accessor reports what it does on stderr and never on stdout:

* ``debug`` -- routine steps: which source a :meth:`get` call picked,
  each GET sent, transport retries.  Shown only when ``verbose``.
* ``info`` -- a fetch that updated the cache, a fall back to the cached
  copy.  Hidden when ``quiet``.
* ``warning`` -- failed fetches, cache files that could not be read or
  written, payloads that did not decode.  Always shown.

Applications that embed the library install their own manager with
:func:`set_output`; otherwise one with default settings is created on
first use.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape


class OutputManager:
    """Routes diagnostic messages to stderr.

    Args:
        no_color: Print plain text instead of Rich markup.  Also forced
            by ``NO_COLOR`` or ``TERM=dumb`` in the environment.
        quiet: Drop ``info`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._plain = no_color or _color_disabled_by_env()
        self._quiet = quiet
        self._verbose = verbose
        self._console = Console(file=sys.stderr, no_color=self._plain, stderr=True)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, escape(message))

    def warning(self, message: str) -> None:
        self._emit(f"Warning: {message}", f"[yellow]Warning:[/yellow] {escape(message)}")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")

    def _emit(self, plain: str, markup: str) -> None:
        if self._plain:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._console.print(markup)


def _color_disabled_by_env() -> bool:
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one if none is set."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* for all resources and transports in the process."""
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next :func:`get_output` builds a fresh one."""
    global _output
    _output = None
