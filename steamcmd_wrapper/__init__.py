"""Control wrapper around Valve's steamcmd command-line client."""

from __future__ import annotations

from steamcmd_wrapper.config import Config
from steamcmd_wrapper.core.errors import SteamCmdError
from steamcmd_wrapper.core.session import LoginOutcome, LoginResult, SessionState, SteamCmdSession
from steamcmd_wrapper.version import __version__

__all__: list[str] = [
    "Config",
    "LoginOutcome",
    "LoginResult",
    "SessionState",
    "SteamCmdError",
    "SteamCmdSession",
    "__version__",
]
