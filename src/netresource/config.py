"""Default storage location resolution with XDG paths and env overrides.

A resource configured by file name alone stores its cache file in an
application data directory supplied by a *storage locator*.  The locator
is an explicit collaborator passed to :func:`cache_path_for`; there is no
hidden module-level directory.

Resolution order for :class:`XdgStorageLocator`:

1. ``$NETRESOURCE_DATA_DIR`` when set.
2. On Linux/BSD: ``$XDG_DATA_HOME/<app>/`` (default ``~/.local/share/<app>/``).
3. On macOS/Windows: ``~/.<app>/``.

The locator creates the directory it returns.  The accessor itself never
creates directories: an explicit ``directory`` passed to
:func:`cache_path_for` must already exist.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from netresource.exceptions import ConfigError

_APP_NAME = "netresource"
_DATA_DIR_ENV = "NETRESOURCE_DATA_DIR"


@runtime_checkable
class StorageLocator(Protocol):
    """Supplies the directory used when a resource names only a file."""

    def data_dir(self) -> Path:
        """Return an existing directory for cache files."""
        ...


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


class XdgStorageLocator:
    """Resolve the application data directory the XDG way.

    Args:
        app_name: Subdirectory name under the XDG data home.  Applications
            should pass their own name so that their caches do not mix.
    """

    def __init__(self, app_name: str = _APP_NAME) -> None:
        self._app_name = app_name

    def data_dir(self) -> Path:
        """Return the data directory, creating it if necessary.

        Raises:
            ConfigError: If the directory cannot be created.
        """
        override = os.environ.get(_DATA_DIR_ENV, "")
        if override:
            path = Path(override)
        elif _is_xdg_platform():
            path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / self._app_name
        else:
            path = Path.home() / f".{self._app_name}"
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"Cannot create data directory {path}: {exc}") from exc
        return path


class FixedStorageLocator:
    """Always hands out the same, already existing directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def data_dir(self) -> Path:
        return self._directory


def cache_path_for(
    filename: str,
    directory: Optional[str | Path] = None,
    locator: Optional[StorageLocator] = None,
) -> Path:
    """Resolve the cache file path for *filename*.

    Args:
        filename: Bare file name of the cached copy.  Must not contain a
            directory component.
        directory: Existing directory to place the file in.  Takes
            precedence over *locator*.
        locator: Supplies the directory when *directory* is ``None``.
            Defaults to :class:`XdgStorageLocator`.

    Returns:
        The absolute cache file path.

    Raises:
        ConfigError: If *filename* is empty or contains a path separator,
            or if *directory* does not exist.
    """
    if not filename or Path(filename).name != filename:
        raise ConfigError(f"Cache filename must be a bare file name, got {filename!r}")

    if directory is not None:
        base = Path(directory)
        if not base.is_dir():
            raise ConfigError(f"Cache directory does not exist: {base}")
    else:
        base = (locator or XdgStorageLocator()).data_dir()
    return (base / filename).absolute()
