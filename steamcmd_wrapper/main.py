#!/usr/bin/env python3
"""steamcmd-wrapper - command-line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from steamcmd_wrapper.config import Config
from steamcmd_wrapper.core.errors import SteamCmdError
from steamcmd_wrapper.core.logging import logger, setup_logging
from steamcmd_wrapper.core.session import SteamCmdSession
from steamcmd_wrapper.integrations.steam_web_api import parse_owned_games
from steamcmd_wrapper.utils.i18n import t
from steamcmd_wrapper.version import __app_name__, __version__

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``steamcmd-wrapper`` command."""
    parser = argparse.ArgumentParser(prog=__app_name__, description=t("cli.description"))
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-u", "--username", help=t("cli.args.username"))
    parser.add_argument("-p", "--password", help=t("cli.args.password"))
    parser.add_argument("-k", "--steam-key", help=t("cli.args.steam_key"))
    parser.add_argument("-c", "--code", help=t("cli.args.code"))
    parser.add_argument("--directory", help=t("cli.args.directory"))
    parser.add_argument("--install-dir", help=t("cli.args.install_dir"))
    parser.add_argument("--env-file", type=Path, help=t("cli.args.env_file"))
    parser.add_argument("--log-file", type=Path, help=t("cli.args.log_file"))
    parser.add_argument("-v", "--verbose", action="store_true", help=t("cli.args.verbose"))

    commands = parser.add_subparsers(dest="command", required=True)
    login = commands.add_parser("login", help=t("cli.commands.login"))
    login.add_argument("--timeout", type=float, help=t("cli.args.timeout"))
    commands.add_parser("steam-id", help=t("cli.commands.steam_id"))
    games = commands.add_parser("games", help=t("cli.commands.games"))
    games.add_argument("--steam-id", help=t("cli.args.steam_id"))
    return parser


def _run(args: argparse.Namespace) -> int:
    config = Config.from_env(
        args.env_file,
        username=args.username,
        password=args.password,
        steam_key=args.steam_key,
        twofactor=args.code,
        directory=args.directory,
        install_dir=args.install_dir,
    )
    session = SteamCmdSession(config)

    if args.command == "login":
        result = session.login(timeout=args.timeout)
        result.raise_for_outcome()
        print(t("cli.login_success", username=session.username))
    elif args.command == "steam-id":
        print(session.get_steam_id())
    elif args.command == "games":
        games = parse_owned_games(session.get_owned_games(args.steam_id))
        json.dump([asdict(game) for game in games], sys.stdout, indent=2)
        print()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run one command and return the exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        return _run(args)
    except (SteamCmdError, TimeoutError) as e:
        logger.error("%s: %s", t("common.error"), e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
