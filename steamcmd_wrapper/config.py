"""
Configuration for a steamcmd session.

Values come from an explicit mapping (the ``initialize`` input), from the
environment, or from a ``.env`` file loaded with python-dotenv.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from steamcmd_wrapper.core.errors import MissingInit

logger = logging.getLogger("steamcmdw.config")

__all__ = ["Config", "ENV_VARS"]

# Environment variable for each configuration field
ENV_VARS: dict[str, str] = {
    "username": "STEAMCMD_USERNAME",
    "password": "STEAMCMD_PASSWORD",
    "steam_key": "STEAM_API_KEY",
    "twofactor": "STEAMCMD_TWOFACTOR",
    "directory": "STEAMCMD_PATH",
    "install_dir": "STEAMCMD_INSTALL_DIR",
}

# Accepted spellings in an initialize mapping
_ALIASES: dict[str, str] = {
    "steamKey": "steam_key",
    "installDir": "install_dir",
    "twoFactor": "twofactor",
    "two_factor": "twofactor",
}


@dataclass
class Config:
    """
    Settings for one steamcmd session.

    Attributes:
        username: Steam account name.
        password: Steam account password.
        steam_key: Steam Web API key; the owned-games lookup is disabled without it.
        twofactor: Steam Guard / mobile authenticator code.
        directory: Explicit path to the steamcmd executable.
        install_dir: Install directory; also the data directory on Linux.
        request_timeout: Seconds before the Web API call gives up (None waits forever).
        log_poll_interval: Seconds between scans of the steamcmd log directory.
    """

    username: str | None = None
    password: str | None = None
    steam_key: str | None = None
    twofactor: str | None = None
    directory: str | None = None
    install_dir: str | None = None
    request_timeout: float | None = 30.0
    log_poll_interval: float = 0.25

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> Config:
        """Build a configuration from an ``initialize``-style mapping.

        Unknown keys are ignored with a debug message.

        Args:
            mapping: Keys ``username``, ``password``, ``steamKey``,
                ``twofactor``, ``directory``, ``installDir`` (snake_case
                spellings are accepted as well).

        Returns:
            The configuration.

        Raises:
            MissingInit: If no mapping was given.
        """
        if mapping is None:
            raise MissingInit()

        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                logger.debug("Ignoring unknown config key %r", key)

        return cls(**values)

    @classmethod
    def from_env(cls, env_file: Path | None = None, **overrides: Any) -> Config:
        """Build a configuration from the environment.

        A ``.env`` file is loaded first; variables already set in the
        process environment are not overwritten by it.

        Args:
            env_file: Explicit .env file; searched upwards from the CWD when omitted.
            **overrides: Field values that win over the environment when not None.

        Returns:
            The configuration.
        """
        load_dotenv(env_file)

        values: dict[str, Any] = {name: os.getenv(var) or None for name, var in ENV_VARS.items()}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
