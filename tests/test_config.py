"""Tests for netresource.config -- storage locators and cache path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from netresource.config import (
    FixedStorageLocator,
    StorageLocator,
    XdgStorageLocator,
    cache_path_for,
)
from netresource.exceptions import ConfigError


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and the XDG data home at tmp_path and clear overrides."""
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.delenv("NETRESOURCE_DATA_DIR", raising=False)
    return tmp_path


# ---------------------------------------------------------------------------
# XdgStorageLocator
# ---------------------------------------------------------------------------


class TestXdgStorageLocator:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(XdgStorageLocator(), StorageLocator)

    def test_xdg_default(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("netresource.config._is_xdg_platform", lambda: True)

        result = XdgStorageLocator().data_dir()
        assert result == isolated_home / ".local" / "share" / "netresource"
        assert result.is_dir()

    def test_xdg_custom(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = isolated_home / "custom_data"
        monkeypatch.setattr("netresource.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(custom))

        assert XdgStorageLocator().data_dir() == custom / "netresource"

    def test_app_name(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("netresource.config._is_xdg_platform", lambda: True)

        result = XdgStorageLocator("eventsapp").data_dir()
        assert result == isolated_home / ".local" / "share" / "eventsapp"

    def test_non_xdg_platform(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("netresource.config._is_xdg_platform", lambda: False)

        result = XdgStorageLocator().data_dir()
        assert result == isolated_home / ".netresource"
        assert result.is_dir()

    def test_env_override(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        override = isolated_home / "override"
        monkeypatch.setenv("NETRESOURCE_DATA_DIR", str(override))

        assert XdgStorageLocator().data_dir() == override
        assert override.is_dir()

    def test_uncreatable_dir_raises(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        blocker = isolated_home / "file"
        blocker.write_text("not a directory")
        monkeypatch.setenv("NETRESOURCE_DATA_DIR", str(blocker / "sub"))

        with pytest.raises(ConfigError, match="Cannot create data directory"):
            XdgStorageLocator().data_dir()


# ---------------------------------------------------------------------------
# cache_path_for
# ---------------------------------------------------------------------------


class TestCachePathFor:
    def test_explicit_directory(self, tmp_path: Path) -> None:
        assert cache_path_for("events.json", directory=tmp_path) == tmp_path / "events.json"

    def test_explicit_directory_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="does not exist"):
            cache_path_for("events.json", directory=tmp_path / "nope")
        assert not (tmp_path / "nope").exists()

    def test_locator_used_without_directory(self, tmp_path: Path) -> None:
        locator = FixedStorageLocator(tmp_path)
        assert cache_path_for("events.json", locator=locator) == tmp_path / "events.json"

    def test_directory_beats_locator(self, tmp_path: Path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        locator = FixedStorageLocator(tmp_path)
        assert cache_path_for("a.txt", directory=other, locator=locator) == other / "a.txt"

    def test_default_locator(self, isolated_home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NETRESOURCE_DATA_DIR", str(isolated_home / "data"))
        assert cache_path_for("a.txt") == isolated_home / "data" / "a.txt"

    def test_result_is_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "rel").mkdir()
        result = cache_path_for("a.txt", directory="rel")
        assert result.is_absolute()
        assert result == tmp_path / "rel" / "a.txt"

    @pytest.mark.parametrize("filename", ["", "dir/a.txt", "../a.txt"])
    def test_rejects_non_bare_filenames(self, filename: str, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="bare file name"):
            cache_path_for(filename, directory=tmp_path)
