"""
Pytest fixtures and configuration for kanbanchan tests
"""
from datetime import datetime, timezone

import pytest
import structlog
from unittest.mock import MagicMock

from kanbanchan.settings import build_settings


@pytest.fixture(scope="session", autouse=True)
def stdlib_logging():
    """Send structlog output through stdlib logging instead of printing to stdout"""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def raw_settings():
    """Settings as they would be read from settings.yaml"""
    return {
        'steam': {
            'id': '76561190000000001',
            'key': 'steam-test-key',
            'collections': {
                'finished': [367520],
                'playing': ['1145360'],
                'up_next': [413150, 1145360],
            },
        },
        'notion': {
            'auth_token': 'secret_notion_token',
            'game_db': 'game-db-id',
            'test_game_db': 'test-game-db-id',
        },
        'sync': {
            'max_workers': 2,
            'timeout': 5,
        },
    }


@pytest.fixture
def settings(raw_settings):
    return build_settings(raw_settings, environ={})


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def mock_response():
    """Factory for requests.Response doubles"""
    def _make(payload=None, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload
        response.text = str(payload)
        if status_code >= 400:
            import requests
            response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
        return response
    return _make


@pytest.fixture
def app_details():
    """appdetails payloads keyed by app id"""
    return {
        '1145360': {
            'name': 'Hades',
            'steam_appid': 1145360,
            'header_image': 'https://cdn.example.com/hades/header.jpg',
            'genres': [{'id': '1', 'description': 'Action'}, {'id': '23', 'description': 'Indie'}],
            'release_date': {'coming_soon': False, 'date': '17 Sep, 2020'},
        },
        '367520': {
            'name': 'Hollow Knight',
            'steam_appid': 367520,
            'header_image': 'https://cdn.example.com/hk/header.jpg',
            'genres': [{'id': '1', 'description': 'Action'}],
            'release_date': {'coming_soon': False, 'date': 'Feb 24, 2017'},
        },
        '413150': {
            'name': 'Stardew Valley',
            'steam_appid': 413150,
            'header_image': 'https://cdn.example.com/sdv/header.jpg',
            'genres': [{'id': '23', 'description': 'Indie'}, {'id': '28', 'description': 'Simulation'}],
            'release_date': {'coming_soon': False, 'date': 'Feb 26, 2016'},
        },
        '1030300': {
            'name': 'Hollow Knight: Silksong',
            'steam_appid': 1030300,
            'header_image': 'https://cdn.example.com/silksong/header.jpg',
            'genres': [{'id': '1', 'description': 'Action'}],
            'release_date': {'coming_soon': True, 'date': 'TBA'},
        },
    }


def make_page(page_id, title, status='Unowned', release_date=None, **extra):
    """Build a Notion page object as returned by a database query"""
    properties = {
        'Name': {'id': 'title', 'type': 'title', 'title': [{'type': 'text', 'plain_text': title}]},
        'Status': {'id': 's', 'type': 'status', 'status': {'name': status} if status else None},
        'Tags': {'id': 't', 'type': 'multi_select', 'multi_select': [{'name': 'Action'}]},
        'Platform': {'id': 'p', 'type': 'multi_select', 'multi_select': [{'name': 'Steam'}, {'name': 'kanbanchan'}]},
        'Official Store Page': {'id': 'u', 'type': 'url', 'url': 'https://store.steampowered.com/app/1'},
        'Cover Art': {'id': 'c', 'type': 'files', 'files': [
            {'name': 'cover', 'type': 'external', 'external': {'url': 'https://cdn.example.com/cover.jpg'}}
        ]},
        'Release Date': {'id': 'r', 'type': 'date', 'date': {'start': release_date} if release_date else None},
        'Completed Date': {'id': 'd', 'type': 'date', 'date': None},
        'Rating': {'id': 'g', 'type': 'rich_text', 'rich_text': []},
        'Notes': {'id': 'n', 'type': 'rich_text', 'rich_text': [{'plain_text': 'Replay on hard'}]},
    }
    properties.update(extra)
    return {'object': 'page', 'id': page_id, 'properties': properties}


@pytest.fixture
def page_factory():
    return make_page
