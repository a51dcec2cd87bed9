"""
Service to resolve the lifecycle status of a game record
"""
from datetime import datetime
from typing import Iterable, Optional

from kanbanchan.models.game import Collection, Status
from kanbanchan.utils import ensure_utc, now_utc

# Manual curation outranks anything derived from the release date
_COLLECTION_PRECEDENCE = (
    (Collection.FINISHED, Status.FINISHED),
    (Collection.PLAYING, Status.PLAYING),
    (Collection.UP_NEXT, Status.UP_NEXT),
)


def resolve_status(release_date: Optional[datetime], is_owned: bool,
                   membership: Iterable[Collection], now: Optional[datetime] = None) -> Status:
    """
    Compute the single status for a game.

    Finished, Playing and Up Next collections win in that order. Otherwise a
    release date at or before ``now`` gives Unowned, and a missing or future
    date gives Unreleased. Ownership does not change the outcome; owned games
    only reach the workspace through a curated collection.
    """
    membership = frozenset(membership or ())
    for collection, status in _COLLECTION_PRECEDENCE:
        if collection in membership:
            return status

    if release_date is not None:
        current = ensure_utc(now) if now is not None else now_utc()
        if ensure_utc(release_date) <= current:
            return Status.UNOWNED

    return Status.UNRELEASED
