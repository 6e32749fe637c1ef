"""Locates the steamcmd executable and the Steam data directory.

The search is driven by ``CANDIDATES``, an ordered table of
(platform, path template) pairs. Templates may reference ``{bundled}``, the
directory shipped next to this package, or ``{registry}``, the Steam path
stored in the Windows registry. The registry is only queried when the search
actually reaches that entry.
"""

from __future__ import annotations

import logging
import platform
import subprocess
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from steamcmd_wrapper.core.errors import SteamCmdNotFound, UnsupportedPlatform
from steamcmd_wrapper.utils.i18n import t

logger = logging.getLogger("steamcmdw.path_resolver")

__all__ = [
    "CANDIDATES",
    "Candidate",
    "PLATFORM_LINUX",
    "PLATFORM_MACOS",
    "PLATFORM_WINDOWS",
    "candidate_paths",
    "executable_name",
    "platform_key",
    "query_registry_steam_path",
    "resolve_data_dir",
    "resolve_steamcmd",
]

PLATFORM_WINDOWS = "win32"
PLATFORM_MACOS = "darwin"
PLATFORM_LINUX = "linux"

_SYSTEM_TO_PLATFORM = {
    "Windows": PLATFORM_WINDOWS,
    "Darwin": PLATFORM_MACOS,
    "Linux": PLATFORM_LINUX,
}

_REGISTRY_KEY = r"HKEY_CURRENT_USER\Software\Valve\Steam"
_REGISTRY_VALUE = "SteamPath"

# Directory searched for a steamcmd shipped alongside the package
BUNDLED_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Candidate:
    """One entry of the executable search table.

    Attributes:
        platform: Platform key the entry applies to.
        template: Path template, formatted with ``bundled`` and ``registry``.
    """

    platform: str
    template: str

    @property
    def needs_registry(self) -> bool:
        return "{registry}" in self.template


_UNIX_TEMPLATES = (
    "{bundled}/steamcmd.sh",
    "{bundled}/steam/steamcmd.sh",
    "{bundled}/steamcmd/steamcmd.sh",
    "{bundled}/steamcmd_linux/steamcmd.sh",
    "{bundled}/steamcmd_osx/steamcmd.sh",
)

CANDIDATES: tuple[Candidate, ...] = (
    Candidate(PLATFORM_WINDOWS, "{bundled}/steamcmd.exe"),
    Candidate(PLATFORM_WINDOWS, "{bundled}/steam/steamcmd.exe"),
    Candidate(PLATFORM_WINDOWS, "{bundled}/steamcmd/steamcmd.exe"),
    Candidate(PLATFORM_WINDOWS, "{registry}/steamcmd.exe"),
    Candidate(PLATFORM_WINDOWS, "C:/Program Files (x86)/steam/steamcmd.exe"),
    Candidate(PLATFORM_WINDOWS, "C:/Program Files/steam/steamcmd.exe"),
    Candidate(PLATFORM_WINDOWS, "C:/steamcmd/steamcmd.exe"),
    *(Candidate(PLATFORM_MACOS, template) for template in _UNIX_TEMPLATES),
    *(Candidate(PLATFORM_LINUX, template) for template in _UNIX_TEMPLATES),
)


def platform_key(system: str | None = None) -> str:
    """Map ``platform.system()`` to the platform keys used in ``CANDIDATES``.

    Args:
        system: Value of ``platform.system()``; detected when omitted.

    Returns:
        One of ``win32``, ``darwin`` or ``linux``.

    Raises:
        UnsupportedPlatform: For any other operating system.
    """
    system = system or platform.system()
    try:
        return _SYSTEM_TO_PLATFORM[system]
    except KeyError:
        raise UnsupportedPlatform(system) from None


def executable_name(platform_name: str) -> str:
    """File name of the steamcmd launcher on the given platform."""
    return "steamcmd.exe" if platform_name == PLATFORM_WINDOWS else "steamcmd.sh"


def query_registry_steam_path() -> str | None:
    """Read the Steam install path from the Windows registry via ``reg query``.

    Returns:
        The ``SteamPath`` value, or None if the query wrote to stderr,
        could not be spawned, or printed something unexpected.
    """
    try:
        result = subprocess.run(
            ["reg", "query", _REGISTRY_KEY, "/v", _REGISTRY_VALUE],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        logger.debug(t("logs.path_resolver.registry_failed", error=e))
        return None

    if result.stderr:
        logger.debug(t("logs.path_resolver.registry_failed", error=result.stderr.strip()))
        return None

    # "KEY    SteamPath    REG_SZ    c:/program files (x86)/steam"
    fields = result.stdout.replace("\r\n", "").split("   ")
    if len(fields) < 4:
        return None

    value = fields[3].strip()
    return value or None


def candidate_paths(
    platform_name: str,
    bundled_dir: Path | None = None,
    registry_lookup: Callable[[], str | None] = query_registry_steam_path,
) -> Iterator[Path]:
    """Yield the candidate executable paths for a platform in priority order.

    Args:
        platform_name: Platform key.
        bundled_dir: Directory substituted for ``{bundled}``.
        registry_lookup: Called at most once, when the first registry
            template is reached. Registry entries are skipped if it
            returns None.

    Yields:
        Candidate paths; existence is not checked here.
    """
    bundled = (bundled_dir or BUNDLED_DIR).as_posix()
    registry: str | None = None
    registry_queried = False

    for candidate in CANDIDATES:
        if candidate.platform != platform_name:
            continue

        if candidate.needs_registry:
            if not registry_queried:
                registry = registry_lookup()
                registry_queried = True
            if not registry:
                continue

        yield Path(candidate.template.format(bundled=bundled, registry=registry))


def resolve_steamcmd(
    hint: str | Path | None = None,
    *,
    platform_name: str | None = None,
    bundled_dir: Path | None = None,
    registry_lookup: Callable[[], str | None] = query_registry_steam_path,
) -> Path:
    """Find the steamcmd executable.

    An existing ``hint`` is returned as-is without searching. Otherwise the
    platform candidates are probed in order and the first existing path wins.
    Existence is all that is checked; the file is not validated as executable.

    Args:
        hint: Explicit executable path from the configuration.
        platform_name: Platform key; detected when omitted.
        bundled_dir: Directory substituted for ``{bundled}``.
        registry_lookup: Source of the Windows registry Steam path.

    Returns:
        Path to the executable.

    Raises:
        SteamCmdNotFound: If no candidate exists.
    """
    if hint:
        hint_path = Path(hint)
        if hint_path.exists():
            return hint_path
        logger.warning(t("logs.path_resolver.hint_missing", path=hint))

    platform_name = platform_name or platform_key()

    for path in candidate_paths(platform_name, bundled_dir, registry_lookup):
        if path.exists():
            logger.info(t("logs.path_resolver.found", path=path))
            return path
        logger.debug(t("logs.path_resolver.probe_miss", path=path))

    raise SteamCmdNotFound(platform_name)


def resolve_data_dir(platform_name: str, executable: Path, install_dir: str | Path | None = None) -> Path | None:
    """Derive the Steam data directory (config and logs) for a platform.

    Windows keeps data next to the executable and macOS under
    ``~/Library/Application Support/Steam``. Linux has no default and
    yields None unless ``install_dir`` is set.

    Args:
        platform_name: Platform key.
        executable: Resolved steamcmd path.
        install_dir: Configured install directory.

    Returns:
        The data directory, or None on Linux without ``install_dir``.
    """
    if platform_name == PLATFORM_WINDOWS:
        return executable.parent
    if platform_name == PLATFORM_MACOS:
        return Path.home() / "Library" / "Application Support" / "Steam"
    if install_dir:
        return Path(install_dir)
    return None
