"""
kanbanchan - Steam to Notion game tracker
Batch entry point: loads settings, builds the clients and runs one reconciliation pass
"""
import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, replace

import structlog

from kanbanchan.exceptions import KanbanchanException
from kanbanchan.reconciler import Reconciler
from kanbanchan.services.notion_service import NotionClient
from kanbanchan.services.steam_service import SteamClient
from kanbanchan.settings import load_settings
from kanbanchan.utils import ColoredFormatter, sanitize_sensitive_data

logger = structlog.get_logger('main')


def configure_logging():
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        handlers=[handler],
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if os.environ.get('LOG_FORMAT') == 'json' else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # urllib3 logs every connection at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Sync a Steam library and wishlist into a Notion games database")
    parser.add_argument("--config", help="Path to settings.yaml (default: $KANBANCHAN_CONFIG or config/settings.yaml)")
    steps = parser.add_mutually_exclusive_group()
    steps.add_argument("--sync-only", action="store_true", help="Only create missing records")
    steps.add_argument("--transition-only", action="store_true", help="Only move released games out of Unreleased")
    parser.add_argument("--dry-run", action="store_true", help="Log changes instead of writing them")
    parser.add_argument("--check", action="store_true", help="Print the games database schema and exit")
    return parser.parse_args(argv)


def print_database_schema(notion_client, database_id):
    database = notion_client.get_database(database_id)
    for name, config in sorted((database.get("properties") or {}).items()):
        print(f"{name}: {config.get('type')}")

    records = notion_client.query_records(database_id, limit=1)
    if records:
        print()
        print(records[0].describe())


def main(argv=None):
    args = parse_args(argv)
    configure_logging()

    try:
        settings = load_settings(args.config)
        if args.dry_run:
            settings = replace(settings, sync=replace(settings.sync, dry_run=True))
        logger.debug(f"Loaded settings: {json.dumps(sanitize_sensitive_data(asdict(settings)))}")

        notion_client = NotionClient(
            settings.notion.auth_token,
            timeout=settings.sync.timeout,
            page_size=settings.sync.page_size,
        )
        if args.check:
            print_database_schema(notion_client, settings.game_database_id)
            return 0

        steam_client = SteamClient(settings.steam.api_key, timeout=settings.sync.timeout)
        reconciler = Reconciler(steam_client, notion_client, settings)
        reports = reconciler.run(sync=not args.transition_only, transition=not args.sync_only)
    except KanbanchanException as e:
        logger.error(f"Run failed: {e.message}", code=e.code)
        return 1

    for report in reports:
        for title, reason in report.skipped.items():
            logger.warning(f"Skipped {title}: {reason}", step=report.step)
    return 0


if __name__ == '__main__':
    sys.exit(main())
