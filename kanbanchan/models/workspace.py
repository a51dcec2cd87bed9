"""
Model: WorkspaceRecord
A page in the Notion games database, decoded from the raw property bag
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import structlog

from kanbanchan.constants import (
    PROP_COMPLETED_DATE,
    PROP_COVER_ART,
    PROP_NAME,
    PROP_NOTES,
    PROP_PLATFORM,
    PROP_RATING,
    PROP_RELEASE_DATE,
    PROP_STATUS,
    PROP_STORE_PAGE,
    PROP_TAGS,
)
from kanbanchan.exceptions import ValidationException
from kanbanchan.models.game import Status
from kanbanchan.utils import format_workspace_date

logger = structlog.get_logger('workspace')

_STATUS_BY_LABEL = {status.value: status for status in Status}


@dataclass
class WorkspaceRecord:
    page_id: str
    title: str
    status: Optional[Status] = None
    status_label: Optional[str] = None
    platforms: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    store_page_url: Optional[str] = None
    cover_art: Optional[str] = None
    release_date: Optional[str] = None
    completed_date: Optional[str] = None
    rating: str = ""
    notes: str = ""

    @classmethod
    def from_page(cls, page: Dict[str, Any]) -> "WorkspaceRecord":
        """
        Decode a Notion page object.

        Raises ValidationException when the page has no id, no properties or no
        usable title. A mistyped optional property is logged and read as empty.
        """
        if not isinstance(page, dict):
            raise ValidationException(f"expected a page object, got {type(page).__name__}")

        page_id = page.get("id")
        if not page_id:
            raise ValidationException("page has no id")

        properties = page.get("properties")
        if not isinstance(properties, dict):
            raise ValidationException(f"page {page_id} has no properties")

        title = _plain_text(_typed(properties, PROP_NAME, "title", page_id, required=True))
        if not title:
            raise ValidationException(f"page {page_id} has an empty {PROP_NAME}")

        status_option = _typed(properties, PROP_STATUS, "status", page_id)
        status_label = status_option.get("name") if isinstance(status_option, dict) else None

        return cls(
            page_id=page_id,
            title=title,
            status=_STATUS_BY_LABEL.get(status_label),
            status_label=status_label,
            platforms=_option_names(_typed(properties, PROP_PLATFORM, "multi_select", page_id)),
            tags=_option_names(_typed(properties, PROP_TAGS, "multi_select", page_id)),
            store_page_url=_typed(properties, PROP_STORE_PAGE, "url", page_id),
            cover_art=_first_file_url(_typed(properties, PROP_COVER_ART, "files", page_id)),
            release_date=_date_start(_typed(properties, PROP_RELEASE_DATE, "date", page_id)),
            completed_date=_date_start(_typed(properties, PROP_COMPLETED_DATE, "date", page_id)),
            rating=_plain_text(_typed(properties, PROP_RATING, "rich_text", page_id)),
            notes=_plain_text(_typed(properties, PROP_NOTES, "rich_text", page_id)),
        )

    def describe(self) -> str:
        """Readable multi-line summary of the record"""
        lines = [
            f"Name: {self.title}",
            f"Status: {self.status_label or '<empty>'}",
            f"Rating: {self.rating or '<empty>'}",
            f"Platforms: {', '.join(self.platforms)}",
            f"Tags: {', '.join(self.tags)}",
            f"Official Store Page: {self.store_page_url or '<empty>'}",
            f"Cover Art: {self.cover_art or '<empty>'}",
            f"Release Date: {self.release_date or '<empty>'}",
            f"Completed Date: {self.completed_date or '<empty>'}",
            f"Notes: {self.notes or '<empty>'}",
        ]
        return "\n".join(lines)


def _typed(properties, name, prop_type, page_id, required=False):
    prop = properties.get(name)
    if prop is None:
        if required:
            raise ValidationException(f"page {page_id} is missing property '{name}'")
        return None
    if not isinstance(prop, dict) or prop.get("type", prop_type) != prop_type:
        found = prop.get("type") if isinstance(prop, dict) else type(prop).__name__
        message = f"page {page_id} property '{name}' should be {prop_type}, found {found}"
        if required:
            raise ValidationException(message)
        # The page still counts for title matching
        logger.warning(f"Ignoring {message}")
        return None
    return prop.get(prop_type)


def _plain_text(rich_text) -> str:
    if not rich_text:
        return ""
    return "".join(part.get("plain_text") or (part.get("text") or {}).get("content", "") for part in rich_text)


def _option_names(options) -> List[str]:
    return [opt["name"] for opt in options or [] if opt.get("name")]


def _first_file_url(files) -> Optional[str]:
    for item in files or []:
        for kind in ("external", "file"):
            url = (item.get(kind) or {}).get("url")
            if url:
                return url
        if item.get("name"):
            return item["name"]
    return None


def _date_start(date) -> Optional[str]:
    if not date:
        return None
    return date.get("start")


# Property builders for create/update payloads

def title_property(text: str) -> Dict[str, Any]:
    return {"title": [{"type": "text", "text": {"content": text}}]}


def status_property(status: Status) -> Dict[str, Any]:
    return {"status": {"name": status.value}}


def multi_select_property(names: Iterable[str]) -> Dict[str, Any]:
    # Notion rejects commas inside option names
    return {"multi_select": [{"name": name.replace(",", " ")} for name in names]}


def url_property(url: str) -> Dict[str, Any]:
    return {"url": url}


def external_files_property(url: str) -> Dict[str, Any]:
    return {"files": [{"name": url[:100], "type": "external", "external": {"url": url}}]}


def date_property(value: datetime) -> Dict[str, Any]:
    return {"date": {"start": format_workspace_date(value)}}
