"""
Maps Steam library/wishlist entries plus catalog details into Game entities
"""
from typing import FrozenSet, Iterable, List, Tuple

import structlog

from kanbanchan.constants import STEAM_HEADER_IMAGE_URL
from kanbanchan.models.catalog import CatalogDetail, OwnedEntry, WishlistEntry
from kanbanchan.models.game import Collection, Game, PlaytimeStats
from kanbanchan.services.collection_service import classify
from kanbanchan.settings import CuratedCollections
from kanbanchan.utils import epoch_to_datetime, minutes_to_timedelta, parse_release_date

logger = structlog.get_logger('mapper')


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def _base_game(external_id: str, detail: CatalogDetail) -> dict:
    release_date = parse_release_date(detail.release_date_text)
    if release_date is None and detail.release_date_text:
        logger.debug(f"No usable release date for {detail.name}: {detail.release_date_text!r}")
    return {
        "external_id": str(external_id),
        "name": detail.name,
        "cover_image_url": detail.header_image or STEAM_HEADER_IMAGE_URL.format(app_id=external_id),
        "genres": _unique(detail.genres),
        "release_date": release_date,
    }


def map_library_entry(entry: OwnedEntry, detail: CatalogDetail, membership: FrozenSet[Collection]) -> Game:
    """Merge an owned-game record with its catalog details"""
    return Game(
        playtime=PlaytimeStats(
            total=minutes_to_timedelta(entry.playtime_forever),
            windows=minutes_to_timedelta(entry.playtime_windows),
            mac=minutes_to_timedelta(entry.playtime_mac),
            linux=minutes_to_timedelta(entry.playtime_linux),
            disconnected=minutes_to_timedelta(entry.playtime_disconnected),
        ),
        last_played=epoch_to_datetime(entry.last_played_epoch),
        collections=frozenset(membership),
        owned=True,
        **_base_game(entry.app_id, detail),
    )


def map_wishlist_entry(entry: WishlistEntry, detail: CatalogDetail) -> Game:
    """Wishlist games carry no playtime and no collection membership"""
    return Game(owned=False, **_base_game(entry.app_id, detail))


def select_curated(entries: Iterable[OwnedEntry], lists: CuratedCollections) -> List[Tuple[OwnedEntry, FrozenSet[Collection]]]:
    """
    Keep only owned entries that appear on a curated list.

    Only hand-sorted games are tracked in the workspace, so an unlisted
    library entry is dropped before any catalog lookup is made for it.
    """
    selected = []
    for entry in entries:
        membership = classify(entry.app_id, lists)
        if membership:
            selected.append((entry, membership))
    return selected


def dedupe_by_name(games: Iterable[Game]) -> List[Game]:
    """Drop later games whose name was already seen, keeping input order"""
    seen = set()
    result = []
    for game in games:
        if game.name in seen:
            logger.debug(f"Dropping duplicate game name {game.name} ({game.external_id})")
            continue
        seen.add(game.name)
        result.append(game)
    return result
