"""Tests for steamcmd executable and data directory resolution."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from steamcmd_wrapper.core.errors import SteamCmdNotFound, UnsupportedPlatform
from steamcmd_wrapper.core.path_resolver import (
    CANDIDATES,
    candidate_paths,
    platform_key,
    query_registry_steam_path,
    resolve_data_dir,
    resolve_steamcmd,
)


def _no_registry() -> None:
    return None


class TestPlatformKey:
    """Tests for platform_key."""

    @pytest.mark.parametrize(
        ("system", "expected"),
        [("Windows", "win32"), ("Darwin", "darwin"), ("Linux", "linux")],
    )
    def test_known_systems(self, system: str, expected: str) -> None:
        assert platform_key(system) == expected

    def test_unknown_system_raises(self) -> None:
        with pytest.raises(UnsupportedPlatform, match="FreeBSD"):
            platform_key("FreeBSD")


class TestCandidateTable:
    """Tests for the declarative candidate list."""

    def test_windows_order(self, bundled_dir: Path) -> None:
        """Bundled paths, then registry, then the fixed install locations."""
        paths = list(candidate_paths("win32", bundled_dir, lambda: "c:/program files (x86)/steam"))
        bundled = bundled_dir.as_posix()

        assert paths == [
            Path(f"{bundled}/steamcmd.exe"),
            Path(f"{bundled}/steam/steamcmd.exe"),
            Path(f"{bundled}/steamcmd/steamcmd.exe"),
            Path("c:/program files (x86)/steam/steamcmd.exe"),
            Path("C:/Program Files (x86)/steam/steamcmd.exe"),
            Path("C:/Program Files/steam/steamcmd.exe"),
            Path("C:/steamcmd/steamcmd.exe"),
        ]

    def test_registry_entry_skipped_when_lookup_fails(self, bundled_dir: Path) -> None:
        paths = list(candidate_paths("win32", bundled_dir, _no_registry))
        assert len(paths) == 6
        assert paths[3] == Path("C:/Program Files (x86)/steam/steamcmd.exe")

    def test_registry_not_queried_for_unix(self, bundled_dir: Path) -> None:
        lookup = MagicMock(return_value="/should/not/be/used")
        paths = list(candidate_paths("linux", bundled_dir, lookup))

        lookup.assert_not_called()
        assert [p.relative_to(bundled_dir).as_posix() for p in paths] == [
            "steamcmd.sh",
            "steam/steamcmd.sh",
            "steamcmd/steamcmd.sh",
            "steamcmd_linux/steamcmd.sh",
            "steamcmd_osx/steamcmd.sh",
        ]

    def test_macos_and_linux_share_templates(self) -> None:
        mac = [c.template for c in CANDIDATES if c.platform == "darwin"]
        linux = [c.template for c in CANDIDATES if c.platform == "linux"]
        assert mac == linux


class TestResolveSteamcmd:
    """Tests for resolve_steamcmd."""

    @pytest.mark.parametrize("platform_name", ["win32", "darwin", "linux"])
    def test_existing_hint_returned_unmodified(self, tmp_path: Path, platform_name: str) -> None:
        """An existing hint wins on every platform, without probing candidates."""
        hint = tmp_path / "custom" / "my_steamcmd"
        hint.parent.mkdir()
        hint.touch()
        lookup = MagicMock()

        result = resolve_steamcmd(str(hint), platform_name=platform_name, registry_lookup=lookup)

        assert result == hint
        lookup.assert_not_called()

    def test_missing_hint_falls_back_to_candidates(self, tmp_path: Path, steamcmd_sh: Path, bundled_dir: Path) -> None:
        result = resolve_steamcmd(tmp_path / "nope.sh", platform_name="linux", bundled_dir=bundled_dir)
        assert result == steamcmd_sh

    def test_first_existing_candidate_wins(self, bundled_dir: Path) -> None:
        later = bundled_dir / "steamcmd_linux" / "steamcmd.sh"
        earlier = bundled_dir / "steamcmd" / "steamcmd.sh"
        for path in (later, earlier):
            path.parent.mkdir()
            path.touch()

        assert resolve_steamcmd(platform_name="linux", bundled_dir=bundled_dir) == earlier

    def test_registry_candidate(self, tmp_path: Path, bundled_dir: Path) -> None:
        steam_dir = tmp_path / "Steam"
        steam_dir.mkdir()
        (steam_dir / "steamcmd.exe").touch()

        result = resolve_steamcmd(
            platform_name="win32",
            bundled_dir=bundled_dir,
            registry_lookup=lambda: steam_dir.as_posix(),
        )

        assert result == steam_dir / "steamcmd.exe"

    @pytest.mark.parametrize("platform_name", ["darwin", "linux"])
    def test_nothing_found_raises_not_found(self, bundled_dir: Path, platform_name: str) -> None:
        with pytest.raises(SteamCmdNotFound) as exc_info:
            resolve_steamcmd(platform_name=platform_name, bundled_dir=bundled_dir)

        assert exc_info.value.platform == platform_name
        assert "steamcmd.sh" in str(exc_info.value)

    def test_windows_not_found_mentions_zip(self, bundled_dir: Path) -> None:
        with pytest.raises(SteamCmdNotFound, match="steamcmd.zip"):
            resolve_steamcmd(platform_name="win32", bundled_dir=bundled_dir, registry_lookup=_no_registry)


class TestRegistryQuery:
    """Tests for query_registry_steam_path."""

    @patch("steamcmd_wrapper.core.path_resolver.subprocess.run")
    def test_parses_steam_path(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(
            stdout="\r\nHKEY_CURRENT_USER\\Software\\Valve\\Steam\r\n"
            "    SteamPath    REG_SZ    c:/program files (x86)/steam\r\n\r\n",
            stderr="",
        )

        assert query_registry_steam_path() == "c:/program files (x86)/steam"
        args = mock_run.call_args[0][0]
        assert args == ["reg", "query", "HKEY_CURRENT_USER\\Software\\Valve\\Steam", "/v", "SteamPath"]

    @patch("steamcmd_wrapper.core.path_resolver.subprocess.run")
    def test_stderr_means_no_path(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(stdout="", stderr="ERROR: The system was unable to find the key")
        assert query_registry_steam_path() is None

    @patch("steamcmd_wrapper.core.path_resolver.subprocess.run", side_effect=FileNotFoundError("reg"))
    def test_missing_reg_binary(self, _mock_run: MagicMock) -> None:
        assert query_registry_steam_path() is None


class TestResolveDataDir:
    """Tests for resolve_data_dir."""

    def test_windows_uses_executable_dir(self, tmp_path: Path) -> None:
        exe = tmp_path / "steamcmd" / "steamcmd.exe"
        assert resolve_data_dir("win32", exe) == tmp_path / "steamcmd"

    def test_macos_uses_application_support(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        assert resolve_data_dir("darwin", Path("/x/steamcmd.sh")) == tmp_path / "Library" / "Application Support" / "Steam"

    def test_linux_without_install_dir_is_none(self) -> None:
        assert resolve_data_dir("linux", Path("/opt/steamcmd/steamcmd.sh")) is None

    def test_linux_uses_install_dir(self, tmp_path: Path) -> None:
        assert resolve_data_dir("linux", Path("/opt/steamcmd/steamcmd.sh"), tmp_path) == tmp_path
