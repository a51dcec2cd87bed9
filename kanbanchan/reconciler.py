"""
Reconciles the Steam library and wishlist with the Notion games database
"""
from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from kanbanchan.constants import (
    PLATFORM_TAGS,
    PROP_COVER_ART,
    PROP_NAME,
    PROP_PLATFORM,
    PROP_RELEASE_DATE,
    PROP_STATUS,
    PROP_STORE_PAGE,
    PROP_TAGS,
    STEAM_APP_PAGE_URL,
)
from kanbanchan.exceptions import KanbanchanException, NotFoundException, SyncException
from kanbanchan.models.catalog import CatalogDetail
from kanbanchan.models.game import Game, Status
from kanbanchan.models.workspace import (
    WorkspaceRecord,
    date_property,
    external_files_property,
    multi_select_property,
    status_property,
    title_property,
    url_property,
)
from kanbanchan.services.game_mapper import (
    dedupe_by_name,
    map_library_entry,
    map_wishlist_entry,
    select_curated,
)
from kanbanchan.services.status_service import resolve_status
from kanbanchan.utils import now_utc, parse_workspace_date

logger = structlog.get_logger('reconciler')


@dataclass
class SyncReport:
    """Outcome of one reconciliation step"""

    step: str
    applied: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)
    dry_run: bool = False

    def summary(self) -> str:
        verb = "would apply" if self.dry_run else "applied"
        return (f"{self.step}: {verb} {len(self.applied)}, unchanged {len(self.unchanged)}, "
                f"skipped {len(self.skipped)}")


class Reconciler:
    """Runs sync and transition passes against injected Steam and Notion clients"""

    def __init__(self, steam_client, notion_client, settings, now: Callable[[], datetime] = now_utc):
        self.steam = steam_client
        self.notion = notion_client
        self.settings = settings
        self.now = now
        self.database_id = settings.game_database_id
        self.dry_run = settings.sync.dry_run

    # Fetching

    def _fetch_details(self, app_ids: List[str], report: SyncReport) -> List[Optional[CatalogDetail]]:
        """Look up catalog details on a bounded pool; result order matches ``app_ids``"""
        def lookup(app_id):
            try:
                return self.steam.get_app_detail(app_id)
            except NotFoundException as e:
                report.skipped[app_id] = e.message
                return None

        if not app_ids:
            return []
        workers = min(self.settings.sync.max_workers, len(app_ids))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            # map re-raises the first worker error while iterating
            return list(executor.map(lookup, app_ids))

    def fetch_owned_games(self, report: SyncReport) -> List[Game]:
        entries = self.steam.get_owned_games(self.settings.steam.user_id)
        curated = select_curated(entries, self.settings.steam.collections)
        logger.info(f"{len(curated)} of {len(entries)} library games are on a curated list")

        details = self._fetch_details([entry.app_id for entry, _ in curated], report)
        return [
            map_library_entry(entry, detail, membership)
            for (entry, membership), detail in zip(curated, details)
            if detail is not None
        ]

    def fetch_wishlist_games(self, report: SyncReport) -> List[Game]:
        entries = self.steam.get_wishlist(self.settings.steam.user_id)
        details = self._fetch_details([entry.app_id for entry in entries], report)
        return [
            map_wishlist_entry(entry, detail)
            for entry, detail in zip(entries, details)
            if detail is not None
        ]

    def fetch_workspace_records(self, filter=None) -> Dict[str, WorkspaceRecord]:
        """Existing records keyed by title; the first page with a given title wins"""
        records: Dict[str, WorkspaceRecord] = {}
        for record in self.notion.query_records(self.database_id, filter=filter):
            records.setdefault(record.title, record)
        return records

    # Payloads

    def build_properties(self, game: Game, now: datetime) -> Tuple[Status, dict]:
        status = resolve_status(game.release_date, game.owned, game.collections, now=now)
        properties = {
            PROP_NAME: title_property(game.name),
            PROP_STATUS: status_property(status),
            PROP_PLATFORM: multi_select_property(PLATFORM_TAGS),
            PROP_TAGS: multi_select_property(game.genres),
            PROP_STORE_PAGE: url_property(STEAM_APP_PAGE_URL.format(app_id=game.external_id)),
        }
        if game.cover_image_url:
            properties[PROP_COVER_ART] = external_files_property(game.cover_image_url)
        if game.release_date is not None:
            properties[PROP_RELEASE_DATE] = date_property(game.release_date)
        return status, properties

    # Passes

    def sync_games(self) -> SyncReport:
        """Create a workspace record for every library or wishlist game missing by name"""
        report = SyncReport(step="sync", dry_run=self.dry_run)
        try:
            owned = self.fetch_owned_games(report)
            wishlist = self.fetch_wishlist_games(report)
            existing = self.fetch_workspace_records()
        except KanbanchanException as e:
            raise SyncException(f"failed to fetch games: {e.message}") from e

        games = dedupe_by_name(owned + wishlist)
        logger.info(f"Reconciling {len(games)} Steam games against {len(existing)} workspace records")

        now = self.now()
        for game in games:
            if game.name in existing:
                report.unchanged.append(game.name)
                continue

            status, properties = self.build_properties(game, now)
            if self.dry_run:
                logger.info(f"[dry-run] Would add {game.name} as {status.value}")
            else:
                try:
                    page_id = self.notion.create_record(self.database_id, properties)
                except KanbanchanException as e:
                    raise SyncException(
                        f"failed to add game {game.name} to database id {self.database_id}: {e.message}",
                        entity=game.name,
                    ) from e
                logger.info(f"Added {game.name} as {status.value}", page_id=page_id)
            report.applied.append(game.name)

        logger.info(report.summary())
        return report

    def transition_games(self) -> SyncReport:
        """Move Unreleased records whose release date has passed to Unowned"""
        report = SyncReport(step="transition", dry_run=self.dry_run)
        status_filter = {"property": PROP_STATUS, "status": {"equals": Status.UNRELEASED.value}}
        try:
            records = self.notion.query_records(self.database_id, filter=status_filter)
        except KanbanchanException as e:
            raise SyncException(f"failed to query unreleased games: {e.message}") from e

        now = self.now()
        for record in records:
            if not record.release_date:
                report.skipped[record.title] = "no release date"
                continue

            try:
                release_date = parse_workspace_date(record.release_date)
            except ValueError as e:
                raise SyncException(
                    f"failed to parse release date of {record.title}: {e}", entity=record.title
                ) from e

            if now < release_date:
                report.unchanged.append(record.title)
                continue

            if self.dry_run:
                logger.info(f"[dry-run] Would move {record.title} to {Status.UNOWNED.value}")
            else:
                try:
                    self.notion.update_record(record.page_id, {PROP_STATUS: status_property(Status.UNOWNED)})
                except KanbanchanException as e:
                    raise SyncException(
                        f"failed to update status of {record.title}: {e.message}", entity=record.title
                    ) from e
                logger.info(f"Moved {record.title} to {Status.UNOWNED.value}", page_id=record.page_id)
            report.applied.append(record.title)

        logger.info(report.summary())
        return report

    def run(self, sync: bool = True, transition: bool = True) -> List[SyncReport]:
        reports = []
        if sync:
            reports.append(self.sync_games())
        if transition:
            reports.append(self.transition_games())
        return reports
