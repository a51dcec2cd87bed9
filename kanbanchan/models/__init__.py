"""
Models package

- game.py: canonical Game entity, Status and Collection taxonomies
- catalog.py: decoded Steam payloads
- workspace.py: Notion game records and property builders
"""

from .game import Game, Status, Collection, PlaytimeStats
from .catalog import CatalogDetail, OwnedEntry, WishlistEntry
from .workspace import WorkspaceRecord
