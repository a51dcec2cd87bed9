"""
Client for the Notion REST API, scoped to the games database
"""
import requests
import structlog
from typing import Any, Dict, List, Optional

from kanbanchan.constants import NOTION_API_URL, NOTION_VERSION, PROP_NAME
from kanbanchan.exceptions import (
    ConfigurationException,
    DecodeException,
    TimeoutException,
    TransportException,
    ValidationException,
)
from kanbanchan.models.workspace import WorkspaceRecord

logger = structlog.get_logger('notion')


class NotionClient:
    """Client for a Notion integration"""

    def __init__(self, auth_token: str, timeout: float = 10, page_size: int = 100,
                 session: requests.Session = None):
        token = (auth_token or "").strip()
        if not token:
            raise ConfigurationException("empty Notion auth token provided")
        self.timeout = timeout
        self.page_size = page_size
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Notion-Version": NOTION_VERSION,
            "Content-Type": "application/json",
        })

    def _request(self, method: str, path: str, what: str, payload: Dict[str, Any] = None) -> Dict[str, Any]:
        try:
            response = self.session.request(method, f"{NOTION_API_URL}{path}", json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise TimeoutException(f"Notion {what} timed out after {self.timeout}s: {e}") from e
        except requests.RequestException as e:
            raise TransportException(f"Notion {what} failed: {e}") from e

        if response.status_code >= 400:
            # Notion explains rejected payloads in the error body
            try:
                detail = response.json().get("message", "")
            except ValueError:
                detail = response.text[:200]
            raise TransportException(f"Notion {what} failed with HTTP {response.status_code}: {detail}")

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeException(f"Notion {what} returned a non-JSON body: {e}") from e
        if not isinstance(data, dict):
            raise DecodeException(f"Notion {what} returned {type(data).__name__}")
        return data

    def get_database(self, database_id: str) -> Dict[str, Any]:
        """Retrieve the database object, including its property schema"""
        return self._request("GET", f"/databases/{database_id}", what=f"get database {database_id}")

    def query_records(self, database_id: str, filter: Optional[Dict[str, Any]] = None,
                      limit: Optional[int] = None) -> List[WorkspaceRecord]:
        """
        Retrieve every page of the database matching ``filter``, following the
        cursor until ``has_more`` is false or ``limit`` records were read. Pages
        that fail validation are logged and skipped.
        """
        body: Dict[str, Any] = {
            "page_size": min(self.page_size, limit) if limit else self.page_size,
            "sorts": [{"property": PROP_NAME, "direction": "ascending"}],
        }
        if filter:
            body["filter"] = filter

        records = []
        while True:
            data = self._request("POST", f"/databases/{database_id}/query",
                                 what=f"query database {database_id}", payload=dict(body))
            results = data.get("results")
            if not isinstance(results, list):
                raise DecodeException(f"query on database {database_id} returned no results list")

            for page in results:
                try:
                    records.append(WorkspaceRecord.from_page(page))
                except ValidationException as e:
                    logger.warning(f"Skipping workspace page: {e.message}")

            if limit and len(records) >= limit:
                records = records[:limit]
                break
            if not data.get("has_more"):
                break
            cursor = data.get("next_cursor")
            if not cursor:
                raise DecodeException(f"query on database {database_id} has_more without next_cursor")
            body["start_cursor"] = cursor

        logger.debug(f"Fetched {len(records)} records from database {database_id}")
        return records

    def create_record(self, database_id: str, properties: Dict[str, Any]) -> str:
        """Create a page in the database and return its id"""
        page = self._request(
            "POST",
            "/pages",
            what=f"create page in database {database_id}",
            payload={"parent": {"database_id": database_id}, "properties": properties},
        )
        page_id = page.get("id")
        if not page_id:
            raise DecodeException(f"created page in database {database_id} has no id")
        return page_id

    def update_record(self, page_id: str, properties: Dict[str, Any]) -> None:
        """Partially update a page; properties not listed are left untouched"""
        if not (page_id or "").strip():
            raise ValidationException("request made with empty page id")
        self._request("PATCH", f"/pages/{page_id}", what=f"update page {page_id}",
                      payload={"properties": properties})
