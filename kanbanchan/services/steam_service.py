"""
Client for the Steam Web API and storefront endpoints
"""
import requests
import structlog
from typing import Any, Dict, List

from kanbanchan.constants import STEAM_API_URL, STEAM_STORE_URL
from kanbanchan.exceptions import (
    ConfigurationException,
    DecodeException,
    NotFoundException,
    TimeoutException,
    TransportException,
)
from kanbanchan.models.catalog import CatalogDetail, OwnedEntry, WishlistEntry

logger = structlog.get_logger('steam')

# Upper bound on wishlist pages requested per run
MAX_WISHLIST_PAGES = 200


def _int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        raise DecodeException(f"expected an integer, got {value!r}")


class SteamClient:
    """Client for Steam"""

    def __init__(self, api_key: str, timeout: float = 10, session: requests.Session = None):
        key = (api_key or "").strip()
        if not key:
            raise ConfigurationException("empty Steam API key provided")
        self.api_key = key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "kanbanchan game tracker"
        })

    def _get_json(self, url: str, params: Dict[str, Any] = None, what: str = "request") -> Any:
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as e:
            raise TimeoutException(f"Steam {what} timed out after {self.timeout}s: {e}") from e
        except requests.RequestException as e:
            raise TransportException(f"Steam {what} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeException(f"Steam {what} returned a non-JSON body: {e}") from e

    def get_app_detail(self, app_id: str) -> CatalogDetail:
        """Get catalog details for a single app id"""
        app_id = str(app_id)
        data = self._get_json(
            f"{STEAM_STORE_URL}/api/appdetails",
            params={"appids": app_id},
            what=f"appdetails for {app_id}",
        )
        if not isinstance(data, dict):
            raise DecodeException(f"appdetails for {app_id} returned {type(data).__name__}")

        app = data.get(app_id)
        if not app or not app.get("success") or not isinstance(app.get("data"), dict):
            raise NotFoundException(f"Steam app {app_id} not found")

        details = app["data"]
        name = details.get("name")
        if not name:
            raise DecodeException(f"appdetails for {app_id} has no name")

        release = details.get("release_date") or {}
        return CatalogDetail(
            app_id=str(details.get("steam_appid") or app_id),
            name=name,
            genres=[g.get("description") for g in details.get("genres") or [] if g.get("description")],
            header_image=details.get("header_image") or None,
            release_date_text=release.get("date") or "",
        )

    def get_owned_games(self, user_id: str) -> List[OwnedEntry]:
        """Get every game owned by the user, including played free games"""
        params = {
            "key": self.api_key,
            "steamid": user_id,
            "include_appinfo": 1,
            "include_played_free_games": 1,
            "skip_unvetted_apps": "false",
            "format": "json",
        }
        data = self._get_json(
            f"{STEAM_API_URL}/IPlayerService/GetOwnedGames/v0001/",
            params=params,
            what=f"owned games for user {user_id}",
        )
        if not isinstance(data, dict) or not isinstance(data.get("response"), dict):
            raise DecodeException(f"owned games for user {user_id} has no response object")

        games = data["response"].get("games") or []
        logger.info(f"Steam library for {user_id} has {len(games)} games")

        entries = []
        for game in games:
            if "appid" not in game:
                raise DecodeException(f"owned game entry without appid: {game!r}")
            entries.append(OwnedEntry(
                app_id=str(game["appid"]),
                name=game.get("name") or "",
                playtime_forever=_int(game.get("playtime_forever")),
                playtime_windows=_int(game.get("playtime_windows_forever")),
                playtime_mac=_int(game.get("playtime_mac_forever")),
                playtime_linux=_int(game.get("playtime_linux_forever")),
                playtime_disconnected=_int(game.get("playtime_disconnected")),
                last_played_epoch=_int(game.get("rtime_last_played")),
            ))
        return entries

    def get_wishlist(self, user_id: str) -> List[WishlistEntry]:
        """Get the user's wishlist, requesting pages until an empty one comes back"""
        wishlist = []
        for page in range(MAX_WISHLIST_PAGES):
            data = self._get_json(
                f"{STEAM_STORE_URL}/wishlist/profiles/{user_id}/wishlistdata/",
                params={"p": page},
                what=f"wishlist page {page} for user {user_id}",
            )
            if not data:  # no entries returned
                break
            if not isinstance(data, dict):
                raise DecodeException(f"wishlist page {page} for user {user_id} returned {type(data).__name__}")

            for app_id, item in data.items():
                name = item.get("name") if isinstance(item, dict) else ""
                wishlist.append(WishlistEntry(app_id=str(app_id), name=name or ""))
        else:
            logger.warning(f"Stopped reading wishlist for {user_id} after {MAX_WISHLIST_PAGES} pages")

        logger.info(f"Steam wishlist for {user_id} has {len(wishlist)} games")
        return wishlist
