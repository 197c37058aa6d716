"""Shared test fixtures for netresource.

Provides reusable fixtures for building mock HTTP transports, cache
paths, and quiet diagnostics.  These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from netresource.output import OutputManager, reset_output, set_output
from netresource.transport import HttpTransport


# ---------------------------------------------------------------------------
# Quiet diagnostics for every test
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _quiet_output_between_tests():
    """Install a quiet, colourless OutputManager and reset it afterwards."""
    set_output(OutputManager(no_color=True, quiet=True))
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Network fakes
# ---------------------------------------------------------------------------


class RecordingHandler:
    """httpx.MockTransport handler that answers with a fixed response.

    Records every request so tests can assert how many GETs were sent and
    which headers they carried.
    """

    def __init__(self, status_code: int = 200, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, content=self.content)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_transport() -> Callable[..., tuple[HttpTransport, RecordingHandler]]:
    """Factory for an HttpTransport wired to a RecordingHandler."""

    def factory(status_code: int = 200, content: bytes = b"") -> tuple[HttpTransport, RecordingHandler]:
        handler = RecordingHandler(status_code, content)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpTransport(client=client), handler

    return factory


# ---------------------------------------------------------------------------
# Cache files
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_file(tmp_path: Path) -> Path:
    """Path for a cache file inside an existing temporary directory (not created)."""
    return tmp_path / "resource.txt"


