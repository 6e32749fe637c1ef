"""Steam Web API client for the owned-games list.

Uses IPlayerService/GetOwnedGames. Results are cached per username for the
lifetime of the client; there is no retry.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests

from steamcmd_wrapper.core.errors import MissingSteamId, MissingSteamKey, NetworkError
from steamcmd_wrapper.utils.i18n import t

logger = logging.getLogger("steamcmdw.steam_web_api")

__all__ = ["LibraryClient", "OWNED_GAMES_URL", "OwnedGame", "parse_owned_games"]

OWNED_GAMES_URL = "http://api.steampowered.com/IPlayerService/GetOwnedGames/v0001/"


@dataclass(frozen=True)
class OwnedGame:
    """Frozen dataclass for one entry of the owned-games list.

    Attributes:
        app_id: Steam application ID.
        name: Display name (empty if the API omitted app info).
        playtime_forever: Total playtime in minutes.
        img_icon_url: Icon hash for the community CDN.
        has_community_visible_stats: Whether the app exposes stats.
    """

    app_id: int
    name: str = ""
    playtime_forever: int = 0
    img_icon_url: str = ""
    has_community_visible_stats: bool = False


def parse_owned_games(raw_games: list[dict[str, Any]]) -> list[OwnedGame]:
    """Convert raw API game records into OwnedGame instances.

    Records without an ``appid`` are skipped.
    """
    games: list[OwnedGame] = []
    for item in raw_games:
        app_id = item.get("appid")
        if app_id is None:
            continue
        games.append(
            OwnedGame(
                app_id=int(app_id),
                name=item.get("name", ""),
                playtime_forever=int(item.get("playtime_forever", 0)),
                img_icon_url=item.get("img_icon_url", ""),
                has_community_visible_stats=bool(item.get("has_community_visible_stats", False)),
            )
        )
    return games


class LibraryClient:
    """Owned-games client with a per-username in-memory cache.

    Attributes:
        steam_key: Steam Web API key.
        timeout: Request timeout in seconds, or None to wait indefinitely.
    """

    def __init__(self, steam_key: str | None, timeout: float | None = 30.0) -> None:
        """Initializes the client.

        Args:
            steam_key: Steam Web API key. Must not be empty.
            timeout: Request timeout in seconds.

        Raises:
            MissingSteamKey: If steam_key is empty or whitespace-only.
        """
        if not steam_key or not steam_key.strip():
            raise MissingSteamKey()
        self.steam_key: str = steam_key.strip()
        self.timeout = timeout
        self._library: dict[str, list[dict[str, Any]]] = {}

    def get_owned_games(
        self,
        username: str,
        steam_id: str | None = None,
        *,
        steam_id_lookup: Callable[[], str | None] | None = None,
    ) -> list[dict[str, Any]]:
        """Returns the owned games for a user, fetching them on first use.

        The cache is keyed by username, so later calls for the same username
        return the first result even if a different steam_id is passed.

        Args:
            username: Cache key.
            steam_id: SteamID64 to query.
            steam_id_lookup: Called for the SteamID when steam_id is empty
                and nothing is cached.

        Returns:
            The raw ``response.games`` list.

        Raises:
            MissingSteamId: If no SteamID is available.
            NetworkError: On connection, HTTP or decoding failures.
        """
        cached = self._library.get(username)
        if cached is not None:
            logger.debug(t("logs.steam_web_api.cache_hit", username=username))
            return cached

        if not steam_id and steam_id_lookup is not None:
            steam_id = steam_id_lookup()
        if not steam_id:
            raise MissingSteamId()

        games = self.fetch_owned_games(steam_id)
        self._library[username] = games
        return games

    def fetch_owned_games(self, steam_id: str) -> list[dict[str, Any]]:
        """Fetches the owned-games list without consulting the cache.

        Args:
            steam_id: SteamID64 to query.

        Returns:
            The raw ``response.games`` list; empty when the profile hides it.

        Raises:
            NetworkError: On connection, HTTP or decoding failures.
        """
        params = {
            "steamid": steam_id,
            "key": self.steam_key,
            "include_appinfo": 1,
            "include_played_free_games": 1,
            "format": "json",
        }

        logger.info(t("logs.steam_web_api.fetching", steam_id=steam_id))
        try:
            response = requests.get(OWNED_GAMES_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(t("logs.steam_web_api.request_failed", error=e))
            raise NetworkError(e) from e

        payload = body.get("response") if isinstance(body, dict) else None
        if not isinstance(payload, dict):
            raise NetworkError(t("logs.steam_web_api.malformed"))

        games = payload.get("games", [])
        logger.info(t("logs.steam_web_api.fetched", count=len(games), steam_id=steam_id))
        return games
