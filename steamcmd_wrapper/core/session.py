# steamcmd_wrapper/core/session.py

"""
steamcmd session controller.

Owns one configured steamcmd installation and drives it:
- Resolves the executable and the data/log directories
- Logs in by spawning ``steamcmd +login <user> <password> [<code>] +quit``
- Watches the log directory for failure markers while the process runs
- Looks up the SteamID and the owned-games list for the logged-in account

A login resolves exactly once: the first failure marker seen in the logs
wins, otherwise the exit code of steamcmd decides.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from steamcmd_wrapper.config import Config
from steamcmd_wrapper.core.account_resolver import get_account_id
from steamcmd_wrapper.core.errors import (
    ConfigNotFound,
    FeatureNotImplemented,
    IncorrectPassword,
    LoginFailed,
    LoginInProgress,
    MissingInit,
    MissingPassword,
    MissingSteamId,
    MissingSteamKey,
    MissingTwoFactor,
    MissingUsername,
    SessionNotInitialized,
    SteamDirNotFound,
)
from steamcmd_wrapper.core.log_tailer import LogTailer, truncate_logs
from steamcmd_wrapper.core.path_resolver import (
    platform_key,
    query_registry_steam_path,
    resolve_data_dir,
    resolve_steamcmd,
)
from steamcmd_wrapper.integrations.steam_web_api import LibraryClient
from steamcmd_wrapper.utils.i18n import t

logger = logging.getLogger("steamcmdw.session")
steamcmd_logger = logging.getLogger("steamcmdw.steamcmd")

__all__ = [
    "LOGIN_MARKERS",
    "LoginOutcome",
    "LoginResult",
    "PendingLogin",
    "SessionState",
    "SteamCmdSession",
    "build_login_args",
    "detect_marker",
]


class SessionState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    LOGGING_IN = "logging_in"
    LOGGED_IN = "logged_in"
    FAILED = "failed"


class LoginOutcome(Enum):
    SUCCESS = "success"
    MISSING_TWO_FACTOR = "missing_two_factor"
    INCORRECT_PASSWORD = "incorrect_password"
    UNKNOWN = "unknown"


# Log text that ends a login early, checked in order
LOGIN_MARKERS: tuple[tuple[str, LoginOutcome], ...] = (
    ("need two-factor code", LoginOutcome.MISSING_TWO_FACTOR),
    ("Invalid Password", LoginOutcome.INCORRECT_PASSWORD),
)


def detect_marker(line: str) -> LoginOutcome | None:
    """Return the failure outcome a log line signals, if any."""
    for marker, outcome in LOGIN_MARKERS:
        if marker in line:
            return outcome
    return None


def build_login_args(username: str, password: str, code: str | None = None) -> list[str]:
    """Build the steamcmd argument list for a login-and-quit run."""
    args = ["+login", username, password]
    if code:
        args.append(code)
    args.append("+quit")
    return args


@dataclass(frozen=True)
class LoginResult:
    """Final result of one login attempt.

    Attributes:
        outcome: How the login ended.
        exit_code: steamcmd exit code; None when a log marker ended the
            login before the process exited.
        lines: Log lines captured during the attempt.
    """

    outcome: LoginOutcome
    exit_code: int | None = None
    lines: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.outcome is LoginOutcome.SUCCESS

    def raise_for_outcome(self) -> None:
        """Raise the matching LoginError unless the login succeeded."""
        if self.outcome is LoginOutcome.MISSING_TWO_FACTOR:
            raise MissingTwoFactor()
        if self.outcome is LoginOutcome.INCORRECT_PASSWORD:
            raise IncorrectPassword()
        if self.outcome is LoginOutcome.UNKNOWN:
            raise LoginFailed(self.exit_code)


class PendingLogin:
    """Completion handle for a running login.

    Resolves exactly once; later results are ignored. The optional callback
    runs on the thread that resolved the login.
    """

    def __init__(self, callback: Callable[[LoginResult], None] | None = None) -> None:
        self._callback = callback
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._result: LoginResult | None = None

    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> LoginResult | None:
        return self._result

    def _claim(self, result: LoginResult) -> bool:
        with self._lock:
            if self._result is not None:
                return False
            self._result = result
            return True

    def _complete(self) -> None:
        try:
            if self._callback is not None:
                self._callback(self._result)
        finally:
            self._event.set()

    def wait(self, timeout: float | None = None) -> LoginResult:
        """Block until the login has an outcome.

        Args:
            timeout: Seconds to wait; None waits indefinitely.

        Returns:
            The login result.

        Raises:
            TimeoutError: If no outcome arrived within timeout.
        """
        if not self._event.wait(timeout):
            raise TimeoutError(t("errors.login_timeout", timeout=timeout))
        return self._result


class SteamCmdSession:
    """One steamcmd installation and the account logged in through it.

    Attributes:
        state: Current SessionState.
        logged_in: Whether the last login succeeded.
        logging: Every steamcmd log line seen by this session.
        steam_id: SteamID64 once resolved.
    """

    def __init__(
        self,
        config: Config | Mapping[str, Any] | None = None,
        *,
        platform_name: str | None = None,
        bundled_dir: Path | None = None,
        registry_lookup: Callable[[], str | None] = query_registry_steam_path,
    ) -> None:
        """Create a session, initializing it when a configuration is given.

        Args:
            config: Config instance or ``initialize``-style mapping.
            platform_name: Platform key override; detected when omitted.
            bundled_dir: Override for the bundled steamcmd directory.
            registry_lookup: Source of the Windows registry Steam path.
        """
        self.state = SessionState.UNINITIALIZED
        self.logged_in = False
        self.logging: list[str] = []
        self.steam_id: str | None = None

        self.config: Config | None = None
        self.platform: str | None = None
        self.executable: Path | None = None
        self.data_dir: Path | None = None
        self.install_dir: Path | None = None

        self._bundled_dir = bundled_dir
        self._registry_lookup = registry_lookup
        self._platform_override = platform_name
        self._library: LibraryClient | None = None
        self._pending: PendingLogin | None = None
        self._process: subprocess.Popen | None = None

        if config is not None:
            self.initialize(config)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(self, config: Config | Mapping[str, Any] | None) -> None:
        """Validate credentials and resolve the steamcmd paths.

        Raises:
            MissingInit: If config is None.
            MissingUsername: If no username is configured.
            MissingPassword: If no password is configured.
            UnsupportedPlatform: On an OS other than Windows, macOS or Linux.
            SteamCmdNotFound: If the executable cannot be located.

        On Linux without ``install_dir`` the data directory stays None;
        login and the account lookup raise SteamDirNotFound then.
        """
        if config is None:
            raise MissingInit()
        if not isinstance(config, Config):
            config = Config.from_mapping(config)

        if not config.username:
            raise MissingUsername()
        if not config.password:
            raise MissingPassword()

        if config.steam_key:
            self._library = LibraryClient(config.steam_key, timeout=config.request_timeout)
        else:
            self._library = None
            logger.warning(t("logs.session.missing_steam_key"))

        platform_name = self._platform_override or platform_key()
        executable = resolve_steamcmd(
            config.directory,
            platform_name=platform_name,
            bundled_dir=self._bundled_dir,
            registry_lookup=self._registry_lookup,
        )
        data_dir = resolve_data_dir(platform_name, executable, config.install_dir)

        self.config = config
        self.platform = platform_name
        self.executable = executable
        self.data_dir = data_dir
        self.install_dir = Path(config.install_dir) if config.install_dir else data_dir
        self.state = SessionState.INITIALIZED

        logger.info(t("logs.session.initialized", executable=executable, data_dir=data_dir))

    @property
    def username(self) -> str | None:
        return self.config.username if self.config else None

    @property
    def log_dir(self) -> Path:
        return self._require_data_dir() / "logs"

    def _require_initialized(self) -> None:
        if self.state is SessionState.UNINITIALIZED:
            raise SessionNotInitialized()

    def _require_data_dir(self) -> Path:
        self._require_initialized()
        if self.data_dir is None:
            raise SteamDirNotFound()
        return self.data_dir

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def start_login(
        self,
        username: str | None = None,
        password: str | None = None,
        code: str | None = None,
        *,
        callback: Callable[[LoginResult], None] | None = None,
    ) -> PendingLogin:
        """Spawn a steamcmd login and return without waiting for it.

        Existing log files are truncated first so only this run's output
        is inspected.

        Args:
            username: Account name; defaults to the configured one.
            password: Password; defaults to the configured one.
            code: Two-factor code; defaults to the configured one.
            callback: Called once with the LoginResult.

        Returns:
            Handle that resolves with the LoginResult.

        Raises:
            SessionNotInitialized: If initialize() has not succeeded.
            LoginInProgress: If another login has not finished.
            SteamDirNotFound: If the data directory is unknown (Linux).
            LoginFailed: If steamcmd could not be started.
        """
        self._require_initialized()
        if self._pending is not None and not self._pending.done():
            raise LoginInProgress()
        log_dir = self.log_dir

        username = username or self.config.username
        password = password or self.config.password
        code = code or self.config.twofactor

        pending = PendingLogin(callback)
        self._pending = pending
        self._process = None
        self.state = SessionState.LOGGING_IN
        self.logged_in = False
        first_line = len(self.logging)

        truncate_logs(log_dir)
        tailer = LogTailer(
            log_dir,
            on_line=lambda line: self._on_log_line(pending, line, first_line),
            poll_interval=self.config.log_poll_interval,
        )
        tailer.start()

        logger.info(t("logs.session.spawning", executable=self.executable, username=username))
        try:
            process = subprocess.Popen(
                [str(self.executable), *build_login_args(username, password, code)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            tailer.stop()
            logger.error(t("logs.session.spawn_failed", error=e))
            self._resolve(pending, LoginResult(LoginOutcome.UNKNOWN, None, self._lines_since(first_line)))
            raise LoginFailed(None) from e

        self._process = process
        if pending.done() and process.poll() is None:
            process.terminate()

        threading.Thread(
            target=self._wait_for_exit,
            args=(process, pending, tailer, first_line),
            name="steamcmd-login",
            daemon=True,
        ).start()
        return pending

    def login(
        self,
        username: str | None = None,
        password: str | None = None,
        code: str | None = None,
        *,
        callback: Callable[[LoginResult], None] | None = None,
        timeout: float | None = None,
    ) -> LoginResult:
        """Log in and block until the outcome is known.

        Failures are reported in the returned LoginResult; call
        ``raise_for_outcome()`` on it to turn them into exceptions.
        """
        return self.start_login(username, password, code, callback=callback).wait(timeout)

    def _lines_since(self, first_line: int) -> tuple[str, ...]:
        return tuple(self.logging[first_line:])

    def _on_log_line(self, pending: PendingLogin, line: str, first_line: int) -> None:
        self.logging.append(line)
        steamcmd_logger.info(line)

        outcome = detect_marker(line)
        if outcome is None or pending.done():
            return

        if self._resolve(pending, LoginResult(outcome, None, self._lines_since(first_line))):
            process = self._process
            if process is not None and process.poll() is None:
                process.terminate()

    def _wait_for_exit(
        self,
        process: subprocess.Popen,
        pending: PendingLogin,
        tailer: LogTailer,
        first_line: int,
    ) -> None:
        exit_code = process.wait()
        tailer.stop()
        logger.debug(t("logs.session.exited", exit_code=exit_code))

        outcome = LoginOutcome.SUCCESS if exit_code == 0 else LoginOutcome.UNKNOWN
        self._resolve(pending, LoginResult(outcome, exit_code, self._lines_since(first_line)))

    def _resolve(self, pending: PendingLogin, result: LoginResult) -> bool:
        if not pending._claim(result):
            return False

        self.logged_in = result.ok
        self.state = SessionState.LOGGED_IN if result.ok else SessionState.FAILED
        if result.ok:
            logger.info(t("logs.session.logged_in", username=self.username))
        else:
            logger.warning(t("logs.session.login_failed", outcome=result.outcome.value, exit_code=result.exit_code))

        pending._complete()
        return True

    # ------------------------------------------------------------------
    # Account and library
    # ------------------------------------------------------------------

    def get_steam_id(self, username: str | None = None) -> str:
        """Return the SteamID of the account stored in config.vdf.

        Raises:
            FeatureNotImplemented: If a username is given.
            SessionNotInitialized: If initialize() has not succeeded.
            SteamDirNotFound: If the data directory is unknown (Linux).
            ConfigNotFound, VdfParseError, MissingSteamId: From the lookup.
        """
        if username:
            raise FeatureNotImplemented("username id lookup")

        self.steam_id = get_account_id(self._require_data_dir())
        return self.steam_id

    def _lookup_steam_id(self) -> str:
        try:
            return self.get_steam_id()
        except ConfigNotFound as e:
            raise MissingSteamId() from e

    def get_owned_games(self, steam_id: str | None = None) -> list[dict[str, Any]]:
        """Return the owned-games list for the session's username.

        The SteamID is taken from the argument, then from an earlier
        lookup, then from config.vdf.

        Raises:
            MissingSteamKey: If no Web API key is configured.
            MissingSteamId: If no SteamID can be determined.
            NetworkError: If the Web API request fails.
        """
        self._require_initialized()
        if self._library is None:
            raise MissingSteamKey()

        return self._library.get_owned_games(
            self.username,
            steam_id or self.steam_id,
            steam_id_lookup=self._lookup_steam_id,
        )

    def download_game(self, app_id: int) -> None:
        raise FeatureNotImplemented("download game")

    def validate_game(self, app_id: int) -> None:
        raise FeatureNotImplemented("validate game")
