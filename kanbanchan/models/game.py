"""
Model: Game
Canonical game entity built fresh on every reconciliation pass
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import FrozenSet, List, Optional


class Status(enum.Enum):
    """Lifecycle status of a workspace record; values are the Notion option labels"""

    UNRELEASED = "Unreleased"
    UNOWNED = "Unowned"
    UP_NEXT = "Up Next"
    PLAYING = "Playing"
    FINISHED = "Finished"


class Collection(enum.Enum):
    """Manually curated Steam collections"""

    FINISHED = "finished"
    PLAYING = "playing"
    UP_NEXT = "up_next"


@dataclass(frozen=True)
class PlaytimeStats:
    total: timedelta = timedelta()
    windows: timedelta = timedelta()
    mac: timedelta = timedelta()
    linux: timedelta = timedelta()
    disconnected: timedelta = timedelta()


@dataclass
class Game:
    external_id: str
    name: str
    cover_image_url: Optional[str] = None
    genres: List[str] = field(default_factory=list)
    release_date: Optional[datetime] = None
    playtime: PlaytimeStats = field(default_factory=PlaytimeStats)
    last_played: Optional[datetime] = None
    collections: FrozenSet[Collection] = frozenset()
    owned: bool = False
