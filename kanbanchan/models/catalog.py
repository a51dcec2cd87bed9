"""
Model: Steam payloads
Typed views of the storefront responses, decoded by SteamClient
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class CatalogDetail:
    """Rich app record from the store's appdetails endpoint"""

    app_id: str
    name: str
    genres: List[str] = field(default_factory=list)
    header_image: Optional[str] = None
    release_date_text: str = ""


@dataclass(frozen=True)
class OwnedEntry:
    """Lightweight library record from GetOwnedGames; playtime values are raw minutes"""

    app_id: str
    name: str = ""
    playtime_forever: int = 0
    playtime_windows: int = 0
    playtime_mac: int = 0
    playtime_linux: int = 0
    playtime_disconnected: int = 0
    last_played_epoch: int = 0


@dataclass(frozen=True)
class WishlistEntry:
    app_id: str
    name: str = ""
