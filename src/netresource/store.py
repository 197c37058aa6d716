"""Filesystem access for the cache file.

The accessor talks to the filesystem through the :class:`Store` protocol
so that tests and applications can substitute their own storage.
:class:`FileStore` is the default implementation: blocking file I/O runs
in a worker thread via :func:`asyncio.to_thread` so the event loop is
never blocked.

Writes are atomic (temp file in the same directory, then
:func:`os.replace`), so a reader never observes a half-written cache
file.  Parent directories are never created.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from netresource.exceptions import CacheReadError, CacheWriteError


@runtime_checkable
class Store(Protocol):
    """Minimal file capabilities the accessor depends on."""

    async def exists(self, path: Path) -> bool: ...

    async def last_modified(self, path: Path) -> datetime: ...

    async def read_bytes(self, path: Path) -> bytes: ...

    async def write_bytes(self, path: Path, data: bytes) -> None: ...


class FileStore:
    """Local filesystem :class:`Store`.

    Example::

        store = FileStore()
        await store.write_bytes(Path("/tmp/events.json"), b"[]")
        assert await store.read_bytes(Path("/tmp/events.json")) == b"[]"
    """

    async def exists(self, path: Path) -> bool:
        """Whether *path* is an existing regular file.

        Raises:
            CacheReadError: If the path cannot be checked (e.g. the name is
                too long or a parent directory is not searchable).
        """
        try:
            return await asyncio.to_thread(path.is_file)
        except OSError as exc:
            raise CacheReadError(f"Cannot check cache file {path}: {exc}", path) from exc

    async def last_modified(self, path: Path) -> datetime:
        """Return the file's modification time as an aware UTC datetime.

        Raises:
            CacheReadError: If the file cannot be stat'ed.
        """
        try:
            stat = await asyncio.to_thread(path.stat)
        except OSError as exc:
            raise CacheReadError(f"Cannot stat cache file {path}: {exc}", path) from exc
        return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)

    async def read_bytes(self, path: Path) -> bytes:
        """Read the whole file.

        Raises:
            CacheReadError: If the file cannot be read.
        """
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise CacheReadError(f"Cannot read cache file {path}: {exc}", path) from exc

    async def write_bytes(self, path: Path, data: bytes) -> None:
        """Create or fully overwrite *path* with *data*.

        Raises:
            CacheWriteError: If the file cannot be written, including when
                its parent directory does not exist.
        """
        try:
            await asyncio.to_thread(_atomic_write, path, data)
        except OSError as exc:
            raise CacheWriteError(f"Cannot write cache file {path}: {exc}", path) from exc


def _atomic_write(path: Path, data: bytes) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
