"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from steamcmd_wrapper.core.errors import MissingUsername
from steamcmd_wrapper.core.session import LoginOutcome, LoginResult
from steamcmd_wrapper.main import build_parser, main

SESSION = "steamcmd_wrapper.main.SteamCmdSession"


@pytest.fixture(autouse=True)
def no_log_handlers():
    """Keep main() from attaching stdout handlers to the package logger."""
    with patch("steamcmd_wrapper.main.setup_logging"):
        yield


class TestParser:
    """Tests for build_parser."""

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_login_options(self) -> None:
        args = build_parser().parse_args(["-u", "u", "-p", "p", "--code", "ABCDE", "login", "--timeout", "30"])
        assert (args.username, args.password, args.code, args.command, args.timeout) == ("u", "p", "ABCDE", "login", 30.0)


class TestMain:
    """Tests for main() with the session mocked out."""

    @patch(SESSION)
    def test_login_success(self, mock_session_cls: MagicMock, capsys: pytest.CaptureFixture) -> None:
        session = mock_session_cls.return_value
        session.username = "u"
        session.login.return_value = LoginResult(LoginOutcome.SUCCESS, 0)

        assert main(["-u", "u", "-p", "p", "login"]) == 0

        config = mock_session_cls.call_args[0][0]
        assert (config.username, config.password) == ("u", "p")
        assert "u" in capsys.readouterr().out

    @patch(SESSION)
    def test_login_failure_exit_code(self, mock_session_cls: MagicMock) -> None:
        mock_session_cls.return_value.login.return_value = LoginResult(LoginOutcome.INCORRECT_PASSWORD)
        assert main(["-u", "u", "-p", "wrong", "login"]) == 1

    @patch(SESSION, side_effect=MissingUsername())
    def test_errors_become_exit_code(self, _mock_session_cls: MagicMock) -> None:
        assert main(["-u", "u", "-p", "p", "steam-id"]) == 1

    @patch(SESSION)
    def test_steam_id(self, mock_session_cls: MagicMock, capsys: pytest.CaptureFixture) -> None:
        mock_session_cls.return_value.get_steam_id.return_value = "76561198000000000"

        assert main(["-u", "u", "-p", "p", "steam-id"]) == 0
        assert capsys.readouterr().out.strip() == "76561198000000000"

    @patch(SESSION)
    def test_games_printed_as_json(self, mock_session_cls: MagicMock, capsys: pytest.CaptureFixture) -> None:
        mock_session_cls.return_value.get_owned_games.return_value = [
            {"appid": 440, "name": "Team Fortress 2"},
            {"name": "no appid"},
        ]

        assert main(["-u", "u", "-p", "p", "-k", "K", "games", "--steam-id", "1"]) == 0
        mock_session_cls.return_value.get_owned_games.assert_called_once_with("1")
        assert json.loads(capsys.readouterr().out) == [
            {
                "app_id": 440,
                "name": "Team Fortress 2",
                "playtime_forever": 0,
                "img_icon_url": "",
                "has_community_visible_stats": False,
            }
        ]

    def test_missing_password_fails(self, tmp_path: Path) -> None:
        assert main(["--env-file", str(tmp_path / "none.env"), "-u", "u", "login"]) == 1
