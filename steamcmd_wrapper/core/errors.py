"""Exception hierarchy for steamcmd-wrapper.

Every error raised by the package derives from ``SteamCmdError`` and carries
a human-readable message from the message catalogue.
"""

from __future__ import annotations

from typing import Any

from steamcmd_wrapper.utils.i18n import t

__all__ = [
    "ConfigNotFound",
    "FeatureNotImplemented",
    "IncorrectPassword",
    "LoginError",
    "LoginFailed",
    "LoginInProgress",
    "MissingInit",
    "MissingInput",
    "MissingPassword",
    "MissingSteamId",
    "MissingSteamKey",
    "MissingTwoFactor",
    "MissingUsername",
    "NetworkError",
    "NotFound",
    "SessionNotInitialized",
    "SteamCmdError",
    "SteamCmdNotFound",
    "SteamDirNotFound",
    "UnsupportedPlatform",
    "VdfParseError",
]


class SteamCmdError(Exception):
    """Base class for all package errors.

    Attributes:
        message_key: Catalogue key used when no explicit message is given.
    """

    message_key = "errors.something_happened"

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(message if message is not None else t(self.message_key, **kwargs))


class MissingInit(SteamCmdError):
    message_key = "errors.missing_init"


class MissingInput(SteamCmdError):
    """A required credential was not supplied."""


class MissingUsername(MissingInput):
    message_key = "errors.missing_username"


class MissingPassword(MissingInput):
    message_key = "errors.missing_password"


class NotFound(SteamCmdError):
    """A file or directory the wrapper depends on does not exist."""


class SteamCmdNotFound(NotFound):
    """No steamcmd executable in any candidate location.

    The message carries the download link for the platform the search ran on.
    """

    def __init__(self, platform: str) -> None:
        self.platform = platform
        super().__init__(t(f"errors.missing_steamcmd.{platform}"))


class SteamDirNotFound(NotFound):
    message_key = "errors.missing_steam_dir"


class ConfigNotFound(NotFound):
    message_key = "errors.missing_config"

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(path=path)


class VdfParseError(SteamCmdError, ValueError):
    """Malformed VDF text.

    Attributes:
        line: 1-based line of the offending token.
        column: 1-based column of the offending token.
    """

    message_key = "errors.vdf_parse"

    def __init__(self, reason: str, line: int = 0, column: int = 0) -> None:
        self.reason = reason
        self.line = line
        self.column = column
        super().__init__(reason=reason, line=line, column=column)


class MissingSteamKey(SteamCmdError):
    message_key = "errors.missing_steam_key"


class MissingSteamId(SteamCmdError):
    message_key = "errors.missing_steam_id"


class LoginError(SteamCmdError):
    """A login attempt ended without a session."""


class MissingTwoFactor(LoginError):
    message_key = "errors.missing_two_factor"


class IncorrectPassword(LoginError):
    message_key = "errors.incorrect_password"


class LoginFailed(LoginError):
    """steamcmd exited abnormally without a recognised log marker."""

    message_key = "errors.login_failed"

    def __init__(self, exit_code: int | None) -> None:
        self.exit_code = exit_code
        super().__init__(exit_code=exit_code)


class LoginInProgress(SteamCmdError):
    message_key = "errors.login_in_progress"


class FeatureNotImplemented(SteamCmdError, NotImplementedError):
    message_key = "errors.feature_missing"

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(feature=feature)


class NetworkError(SteamCmdError):
    message_key = "errors.network"

    def __init__(self, error: object) -> None:
        super().__init__(error=error)


class SessionNotInitialized(SteamCmdError):
    message_key = "errors.not_initialized"


class UnsupportedPlatform(SteamCmdError):
    message_key = "errors.unsupported_platform"

    def __init__(self, system: str) -> None:
        self.system = system
        super().__init__(system=system)
