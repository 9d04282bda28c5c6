"""Presentation helpers: status categories, colors and text formatting."""

from datetime import date, datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .models import Issue


class StatusCategory(Enum):
    """Coarse workflow category of a status name."""

    BACKLOG = "backlog"
    IN_PROGRESS = "inProgress"
    DONE = "done"


COLORS: Mapping[str, str] = MappingProxyType(
    {
        "primary": "#0052CC",  # Jira blue
        "secondary": "#253858",
        "text": "#172B4D",
        "light_gray": "#F4F5F7",
        "border": "#DFE1E6",
        "link": "#0065FF",
        "epic": "#6554C0",
        "story": "#36B37E",
        "task": "#4BADE8",
        "bug": "#FF5630",
        "error": "#DE350B",
        "in_progress": "#0052CC",
        "status_backlog": "#8993A4",
        "status_in_progress": "#FFAB00",
        "status_done": "#36B37E",
    }
)

# Matched in order; the first category with a keyword contained in the
# lower-cased status wins.
STATUS_CATEGORIES: Mapping[StatusCategory, Tuple[str, ...]] = MappingProxyType(
    {
        StatusCategory.BACKLOG: (
            "Backlog",
            "Selected for Development",
            "To Do",
            "Open",
            "New",
        ),
        StatusCategory.IN_PROGRESS: (
            "In Progress",
            "In Review",
            "Development",
            "Testing",
            "In Development",
            "Coding",
            "Implementation",
            "Review",
        ),
        StatusCategory.DONE: (
            "Ready",
            "Production",
            "Done",
            "Closed",
            "Resolved",
            "Complete",
            "Released",
            "Deployed",
        ),
    }
)

STATUS_COLORS: Mapping[StatusCategory, str] = MappingProxyType(
    {
        StatusCategory.BACKLOG: COLORS["status_backlog"],
        StatusCategory.IN_PROGRESS: COLORS["status_in_progress"],
        StatusCategory.DONE: COLORS["status_done"],
    }
)

ISSUE_TYPE_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "epic": COLORS["epic"],
        "story": COLORS["story"],
        "task": COLORS["task"],
        "bug": COLORS["bug"],
    }
)

NO_DESCRIPTION = "No description provided."
DESCRIPTION_PARSE_ERROR = "Error parsing description."
UNSUPPORTED_DESCRIPTION = "Description in unsupported format."
DESCRIPTION_LIMIT = 200


def get_status_category(
    status: str,
    categories: Mapping[StatusCategory, Sequence[str]] = STATUS_CATEGORIES,
) -> StatusCategory:
    """Classify a status name, defaulting to backlog when nothing matches."""
    status = (status or "").lower()

    for category, keywords in categories.items():
        if any(keyword.lower() in status for keyword in keywords):
            return category

    return StatusCategory.BACKLOG


def get_status_color(
    status: str, colors: Mapping[StatusCategory, str] = STATUS_COLORS
) -> str:
    return colors[get_status_category(status)]


def get_issue_type_color(
    issue_type: str, colors: Mapping[str, str] = ISSUE_TYPE_COLORS
) -> str:
    return colors.get((issue_type or "").lower(), COLORS["text"])


def is_delayed(issue: Issue, today: Optional[date] = None) -> bool:
    """An issue is delayed when its due date has passed and it is not done."""
    if issue.due_date is None:
        return False

    if issue.due_date < (today or date.today()):
        return get_status_category(issue.status) is not StatusCategory.DONE

    return False


def is_in_development(status: str, dev_statuses: Iterable[str]) -> bool:
    return status in dev_statuses


def extract_adf_text(nodes: Any) -> str:
    """Concatenate the text of an Atlassian Document Format node list.

    Text nodes contribute their ``text``; container nodes contribute the
    text of their ``content``. Parts are joined with single spaces.
    """
    if not nodes or not isinstance(nodes, list):
        return ""

    parts: List[str] = []
    for node in nodes:
        if node.get("text"):
            parts.append(node["text"])
        elif node.get("content"):
            parts.append(extract_adf_text(node["content"]))

    return " ".join(part for part in parts if part)


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def format_description(description: Any, limit: int = DESCRIPTION_LIMIT) -> str:
    """Render an issue description as plain text of at most ``limit`` chars.

    Longer text is cut to ``limit`` characters followed by ``...``.
    """
    if not description:
        return NO_DESCRIPTION

    if isinstance(description, dict) and "content" in description:
        try:
            plain_text = extract_adf_text(description["content"])
        except (AttributeError, KeyError, TypeError):
            plain_text = DESCRIPTION_PARSE_ERROR
        return _truncate(plain_text, limit)

    if isinstance(description, str):
        return _truncate(description, limit)

    return UNSUPPORTED_DESCRIPTION


def format_date(value: Union[date, datetime, None], default: str = "Unknown") -> str:
    """Format as ``DD-MM-YYYY``; aware timestamps are shown in local time."""
    if value is None:
        return default
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%d-%m-%Y")


def format_long_date(value: date) -> str:
    """Format as ``October 5, 2026``."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def format_week_title(week_start: date) -> str:
    """Title for the ISO week beginning on ``week_start``."""
    week_end = week_start + timedelta(days=6)
    week_number = week_start.isocalendar()[1]
    return f"Week {week_number} ({format_date(week_start)} to {format_date(week_end)})"
