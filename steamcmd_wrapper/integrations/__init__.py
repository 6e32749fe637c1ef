from __future__ import annotations

__all__: list[str] = ["LibraryClient", "OwnedGame", "parse_owned_games"]

from steamcmd_wrapper.integrations.steam_web_api import LibraryClient, OwnedGame, parse_owned_games
