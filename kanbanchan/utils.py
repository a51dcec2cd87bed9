import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from kanbanchan.constants import RELEASE_DATE_SENTINELS, STEAM_DATE_FORMATS

_YEAR_PATTERN = re.compile(r'^\d{4}$')


# Custom logging formatter to support colors
class ColoredFormatter(logging.Formatter):
    # Define color codes
    COLORS = {
        'DEBUG': '\033[94m',   # Blue
        'INFO': '\033[92m',    # Green
        'WARNING': '\033[93m', # Yellow
        'ERROR': '\033[91m',   # Red
        'CRITICAL': '\033[95m' # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"

        return super().format(record)


def sanitize_sensitive_data(data, sensitive_keys=None):
    """
    Mask credentials before logging.

    Args:
        data: Dictionary, list, or scalar to sanitize
        sensitive_keys: Substrings that mark a key as sensitive

    Returns:
        Sanitized copy of the data
    """
    if sensitive_keys is None:
        sensitive_keys = ['secret', 'api_key', 'token', 'key', 'auth', 'password']

    if isinstance(data, dict):
        sanitized = {}
        for k, v in data.items():
            key_lower = str(k).lower()
            if any(sens in key_lower for sens in sensitive_keys) and not isinstance(v, (dict, list)):
                # Show only first 2 and last 2 chars if string, else mask completely
                if isinstance(v, str) and len(v) > 4:
                    sanitized[k] = f"{v[:2]}***{v[-2:]}"
                else:
                    sanitized[k] = "***"
            else:
                sanitized[k] = sanitize_sensitive_data(v, sensitive_keys)
        return sanitized

    if isinstance(data, list):
        return [sanitize_sensitive_data(item, sensitive_keys) for item in data]

    return data


def now_utc():
    """Returns current datetime in UTC (aware)"""
    return datetime.now(timezone.utc)


def ensure_utc(dt):
    """Ensure a datetime object is aware and in UTC. Naive values are assumed to be UTC."""
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_release_date(text: Optional[str]) -> Optional[datetime]:
    """
    Parse a storefront release date into a UTC datetime.

    Tries "Feb 24, 2017", then "24 Feb, 2017", then a bare year. Returns None
    for empty text, the "to be announced" family of placeholders, and anything
    that matches none of the formats. Never raises.
    """
    if not text or not isinstance(text, str):
        return None

    text = text.strip()
    if not text or text.lower() in RELEASE_DATE_SENTINELS:
        return None

    for fmt in STEAM_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    if _YEAR_PATTERN.match(text):
        year = int(text)
        if year >= 1:
            return datetime(year, 1, 1, tzinfo=timezone.utc)

    return None


def parse_workspace_date(text: str) -> datetime:
    """
    Parse a Notion date ("2017-02-24", "2017-02-24T00:00:00Z",
    "2017-02-24T00:00:00.000+00:00") into a UTC datetime.

    Raises ValueError on malformed input.
    """
    if not text or not isinstance(text, str):
        raise ValueError(f"empty workspace date: {text!r}")

    text = text.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return ensure_utc(datetime.fromisoformat(text))


def format_workspace_date(dt: datetime) -> str:
    """Render a datetime as the date-only string Notion accepts"""
    return ensure_utc(dt).strftime('%Y-%m-%d')


def minutes_to_timedelta(value) -> timedelta:
    """Steam reports playtime counters in minutes"""
    return timedelta(minutes=int(value or 0))


def epoch_to_datetime(value) -> Optional[datetime]:
    """Convert a unix timestamp; 0 means the game was never played"""
    seconds = int(value or 0)
    if seconds <= 0:
        return None
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
