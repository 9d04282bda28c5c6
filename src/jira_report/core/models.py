"""Issue model parsed from Jira search results."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..utils.logging_config import get_logger

logger = get_logger(__name__)

JIRA_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def parse_jira_date(value: Any) -> Optional[date]:
    """Parse a Jira ``duedate`` value (``YYYY-MM-DD``)."""
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug(f"Ignoring malformed date: {value!r}")
        return None


def parse_jira_datetime(value: Any) -> Optional[datetime]:
    """Parse a Jira timestamp such as ``2024-01-16T14:30:00.000+0000``."""
    if not value:
        return None
    try:
        return datetime.strptime(str(value), JIRA_DATETIME_FORMAT)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug(f"Ignoring malformed timestamp: {value!r}")
        return None


def _nested(fields: Dict[str, Any], name: str, attr: str) -> Optional[str]:
    value = fields.get(name)
    if isinstance(value, dict):
        result = value.get(attr)
        return str(result) if result else None
    return None


@dataclass(frozen=True)
class Issue:
    """A single Jira issue as used by the reports."""

    key: str
    issue_type: str
    summary: str
    status: str
    description: Any = None
    due_date: Optional[date] = None
    updated: Optional[datetime] = None
    created: Optional[datetime] = None
    assignee: Optional[str] = None
    parent_key: Optional[str] = None
    epic_key: Optional[str] = None

    @property
    def is_epic(self) -> bool:
        return self.issue_type == "Epic"

    def browse_url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/browse/{self.key}"

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Issue":
        """Build an issue from one element of the search ``issues`` array."""
        fields = raw.get("fields") or {}

        return cls(
            key=raw.get("key") or "",
            issue_type=_nested(fields, "issuetype", "name") or "Unknown",
            summary=fields.get("summary") or "No summary",
            status=_nested(fields, "status", "name") or "Unknown Status",
            description=fields.get("description"),
            due_date=parse_jira_date(fields.get("duedate")),
            updated=parse_jira_datetime(fields.get("updated")),
            created=parse_jira_datetime(fields.get("created")),
            assignee=_nested(fields, "assignee", "displayName"),
            parent_key=_nested(fields, "parent", "key"),
            epic_key=_nested(fields, "epic", "key"),
        )
