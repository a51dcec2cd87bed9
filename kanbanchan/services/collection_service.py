"""
Service to classify library games against the curated collection lists
"""
from typing import FrozenSet

from kanbanchan.models.game import Collection
from kanbanchan.settings import CuratedCollections


def classify(external_id: str, lists: CuratedCollections) -> FrozenSet[Collection]:
    """Return every curated collection that lists the app id (exact string match)"""
    app_id = str(external_id)
    membership = set()
    if app_id in lists.finished:
        membership.add(Collection.FINISHED)
    if app_id in lists.playing:
        membership.add(Collection.PLAYING)
    if app_id in lists.up_next:
        membership.add(Collection.UP_NEXT)
    return frozenset(membership)
