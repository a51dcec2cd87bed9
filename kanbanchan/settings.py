import copy
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

import structlog
import yaml

from kanbanchan.constants import CONFIG_FILE, DEFAULT_SETTINGS, TEST_ENVIRONMENTS
from kanbanchan.exceptions import ConfigurationException

logger = structlog.get_logger('settings')


@dataclass(frozen=True)
class CuratedCollections:
    """Steam app ids the user sorted by hand; the storefront API cannot see collections"""

    finished: Tuple[str, ...] = ()
    playing: Tuple[str, ...] = ()
    up_next: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SteamSettings:
    user_id: str
    api_key: str
    collections: CuratedCollections = field(default_factory=CuratedCollections)


@dataclass(frozen=True)
class NotionSettings:
    auth_token: str
    game_db: str
    test_game_db: str = ""


@dataclass(frozen=True)
class SyncSettings:
    max_workers: int = 4
    timeout: float = 10
    page_size: int = 100
    dry_run: bool = False


@dataclass(frozen=True)
class Settings:
    steam: SteamSettings
    notion: NotionSettings
    sync: SyncSettings = field(default_factory=SyncSettings)
    environment: str = ""

    @property
    def game_database_id(self) -> str:
        """Games database targeted by this run; development environments use the test copy"""
        if self.environment.lower() in TEST_ENVIRONMENTS and self.notion.test_game_db:
            return self.notion.test_game_db
        return self.notion.game_db


def _merge_defaults(loaded):
    # Deep merge with defaults to ensure new keys are present
    merged = copy.deepcopy(DEFAULT_SETTINGS)
    for section, values in (loaded or {}).items():
        if values is None:
            # "steam:" with nothing under it
            continue
        if isinstance(merged.get(section), dict) and not isinstance(values, dict):
            raise ConfigurationException(f"settings section '{section}' must be a mapping")
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            for key, value in values.items():
                if isinstance(value, dict) and isinstance(merged[section].get(key), dict):
                    merged[section][key].update(value)
                else:
                    merged[section][key] = value
        else:
            merged[section] = values
    return merged


def _id_list(values) -> Tuple[str, ...]:
    # YAML turns bare app ids into ints
    return tuple(str(v).strip() for v in values or [] if str(v).strip())


def _coerce_positive(value, default, cast):
    try:
        numeric = cast(value)
    except (TypeError, ValueError):
        return default
    return numeric if numeric > 0 else default


def build_settings(raw: dict, environ=None) -> Settings:
    """Build a Settings object from a raw dict, applying environment overrides"""
    environ = os.environ if environ is None else environ
    data = _merge_defaults(raw)
    steam = data["steam"]
    notion = data["notion"]
    sync = data["sync"]
    collections = steam.get("collections") or {}

    return Settings(
        steam=SteamSettings(
            user_id=str(environ.get("STEAM_USER_ID") or steam.get("id") or "").strip(),
            api_key=str(environ.get("STEAM_API_KEY") or steam.get("key") or "").strip(),
            collections=CuratedCollections(
                finished=_id_list(collections.get("finished")),
                playing=_id_list(collections.get("playing")),
                up_next=_id_list(collections.get("up_next")),
            ),
        ),
        notion=NotionSettings(
            auth_token=str(environ.get("NOTION_TOKEN") or notion.get("auth_token") or "").strip(),
            game_db=str(notion.get("game_db") or "").strip(),
            test_game_db=str(notion.get("test_game_db") or "").strip(),
        ),
        sync=SyncSettings(
            max_workers=_coerce_positive(sync.get("max_workers"), 4, int),
            timeout=_coerce_positive(sync.get("timeout"), 10, float),
            page_size=min(_coerce_positive(sync.get("page_size"), 100, int), 100),
            dry_run=bool(sync.get("dry_run")),
        ),
        environment=str(environ.get("ENVIRONMENT") or "").strip(),
    )


def verify_settings(settings: Settings):
    success = True
    errors = []
    if not settings.steam.user_id:
        success = False
        errors.append({"path": "steam/id", "error": "Steam user id is not configured."})
    if not settings.steam.api_key:
        success = False
        errors.append({"path": "steam/key", "error": "Steam API key is not configured."})
    if not settings.notion.auth_token:
        success = False
        errors.append({"path": "notion/auth_token", "error": "Notion integration token is not configured."})
    if not settings.game_database_id:
        success = False
        errors.append({"path": "notion/game_db", "error": "Games database id is not configured."})
    return success, errors


def load_settings(path: Optional[str] = None, environ=None) -> Settings:
    """
    Read the YAML settings file once at process start.

    A missing file is replaced by a template built from DEFAULT_SETTINGS and
    reported as a ConfigurationException so the user can fill it in.
    """
    environ = os.environ if environ is None else environ
    path = path or environ.get("KANBANCHAN_CONFIG") or CONFIG_FILE

    if not os.path.exists(path):
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "w") as yaml_file:
            yaml.dump(DEFAULT_SETTINGS, yaml_file, sort_keys=False)
        raise ConfigurationException(f"Configuration file {path} did not exist; a template was written, fill it in and rerun.")

    logger.debug(f"Reading configuration file: {path}")
    try:
        with open(path, "r") as yaml_file:
            raw = yaml.safe_load(yaml_file) or {}
    except yaml.YAMLError as e:
        raise ConfigurationException(f"Configuration file {path} is not valid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationException(f"Configuration file {path} must contain a mapping.")

    settings = build_settings(raw, environ)
    success, errors = verify_settings(settings)
    if not success:
        details = "; ".join(f"{e['path']}: {e['error']}" for e in errors)
        raise ConfigurationException(f"Invalid configuration in {path}: {details}")
    return settings
