import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_DIR = os.path.join(os.path.dirname(APP_DIR), 'config')
CONFIG_FILE = os.path.join(CONFIG_DIR, 'settings.yaml')

STEAM_API_URL = 'https://api.steampowered.com'
STEAM_STORE_URL = 'https://store.steampowered.com'
STEAM_APP_PAGE_URL = STEAM_STORE_URL + '/app/{app_id}'
STEAM_HEADER_IMAGE_URL = 'https://cdn.cloudflare.steamstatic.com/steam/apps/{app_id}/header.jpg'

NOTION_API_URL = 'https://api.notion.com/v1'
NOTION_VERSION = '2022-06-28'

# Workspace property names in the games database
PROP_NAME = 'Name'
PROP_STATUS = 'Status'
PROP_TAGS = 'Tags'
PROP_STORE_PAGE = 'Official Store Page'
PROP_COMPLETED_DATE = 'Completed Date'
PROP_COVER_ART = 'Cover Art'
PROP_PLATFORM = 'Platform'
PROP_RELEASE_DATE = 'Release Date'
PROP_RATING = 'Rating'
PROP_NOTES = 'Notes'

PLATFORM_TAGS = ['Steam', 'kanbanchan']

# Release date text the storefront uses for games without a date
RELEASE_DATE_SENTINELS = frozenset([
    'to be announced',
    'tba',
    'tbd',
    'coming soon',
])

STEAM_DATE_FORMATS = [
    '%b %d, %Y',
    '%d %b, %Y',
]

# ENVIRONMENT values that point the run at the test database
TEST_ENVIRONMENTS = frozenset(['development', 'dev', 'staging', 'local'])

DEFAULT_SETTINGS = {
    "steam": {
        "id": "",
        "key": "",
        "collections": {
            "finished": [],
            "playing": [],
            "up_next": [],
        },
    },
    "notion": {
        "auth_token": "",
        "game_db": "",
        "test_game_db": "",
    },
    "sync": {
        "max_workers": 4,
        "timeout": 10,
        "page_size": 100,
        "dry_run": False,
    },
}
