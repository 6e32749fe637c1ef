"""
Steam account lookup from the steamcmd data directory.

steamcmd records the accounts it has logged in with in
``<data_dir>/config/config.vdf`` under
``InstallConfigStore/Software/Valve/Steam/Accounts``. Only the first account
is considered.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from steamcmd_wrapper.core import vdf_text
from steamcmd_wrapper.core.errors import ConfigNotFound, MissingSteamId
from steamcmd_wrapper.utils.i18n import t

logger = logging.getLogger("steamcmdw.account_resolver")

__all__ = ["ACCOUNTS_PATH", "config_path", "get_account_id", "read_accounts"]

ACCOUNTS_PATH: tuple[str, ...] = ("InstallConfigStore", "Software", "Valve", "Steam", "Accounts")


def config_path(data_dir: str | Path) -> Path:
    """Location of config.vdf inside a steamcmd data directory."""
    return Path(data_dir) / "config" / "config.vdf"


def read_accounts(data_dir: str | Path) -> dict[str, Any]:
    """Read and decode the ``Accounts`` block of config.vdf.

    Args:
        data_dir: The steamcmd data directory.

    Returns:
        Mapping of account name to account record, in file order.

    Raises:
        ConfigNotFound: If config.vdf is missing or unreadable.
        VdfParseError: If config.vdf is not valid VDF.
        MissingSteamId: If the tree has no ``Accounts`` block.
    """
    path = config_path(data_dir)
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ConfigNotFound(path) from e

    node: Any = vdf_text.loads(text)
    for key in ACCOUNTS_PATH:
        if not isinstance(node, dict) or key not in node:
            logger.warning(t("logs.account_resolver.path_missing", key=key, path=path))
            raise MissingSteamId()
        node = node[key]

    if not isinstance(node, dict):
        raise MissingSteamId()
    return node


def _first_account(data_dir: str | Path) -> tuple[str, dict[str, Any]]:
    accounts = read_accounts(data_dir)
    if not accounts:
        raise MissingSteamId()

    name = next(iter(accounts))
    record = accounts[name]
    if not isinstance(record, dict):
        raise MissingSteamId()
    return name, record


def get_account_id(data_dir: str | Path) -> str:
    """Return the SteamID of the first account in config.vdf.

    Args:
        data_dir: The steamcmd data directory.

    Returns:
        The SteamID64 as a string.

    Raises:
        ConfigNotFound: If config.vdf is missing or unreadable.
        VdfParseError: If config.vdf is not valid VDF.
        MissingSteamId: If no account or SteamID is recorded.
    """
    name, record = _first_account(data_dir)
    steam_id = record.get("SteamID")
    if not steam_id:
        raise MissingSteamId()

    logger.debug(t("logs.account_resolver.found", name=name, steam_id=steam_id))
    return steam_id
