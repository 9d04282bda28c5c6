"""Grouping of issues by due week, assignee and parent epic."""

from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence

from ..utils.logging_config import get_logger
from .models import Issue

logger = get_logger(__name__)

UNASSIGNED = "Unassigned"


def week_start(day: date) -> date:
    """Return the Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())


def group_issues_by_week(issues: Sequence[Issue]) -> Dict[date, List[Issue]]:
    """Bucket issues by the Monday of their due week.

    Issues without a due date are left out.
    """
    logger.info(f"Grouping {len(issues)} issues by week")
    result: Dict[date, List[Issue]] = {}

    for issue in issues:
        if issue.due_date is None:
            continue
        result.setdefault(week_start(issue.due_date), []).append(issue)

    logger.info(f"Grouped into {len(result)} weeks")
    return result


def group_issues_by_assignee(issues: Sequence[Issue]) -> Dict[str, List[Issue]]:
    """Bucket issues by assignee display name."""
    result: Dict[str, List[Issue]] = {}
    for issue in issues:
        result.setdefault(issue.assignee or UNASSIGNED, []).append(issue)
    return result


def group_issues_by_epic(issues: Sequence[Issue]) -> Dict[str, List[Issue]]:
    """Bucket issues under their parent epic.

    Each epic bucket starts with the epic itself. A non-epic issue joins an
    epic bucket only when its parent (or legacy epic link) is one of the
    epics in ``issues``; everything else lands in ``"Unassigned"``, which is
    always present and always last.
    """
    epics = [issue for issue in issues if issue.is_epic]
    non_epics = [issue for issue in issues if not issue.is_epic]

    epic_map: Dict[str, List[Issue]] = {epic.key: [epic] for epic in epics}
    unassigned: List[Issue] = []

    for issue in non_epics:
        link = issue.parent_key or issue.epic_key
        if link and link in epic_map:
            epic_map[link].append(issue)
        else:
            unassigned.append(issue)

    epic_map[UNASSIGNED] = unassigned
    return epic_map


def filter_recent_weeks(
    issues_by_week: Dict[date, List[Issue]], today: Optional[date] = None
) -> Dict[date, List[Issue]]:
    """Keep the current week, the two weeks before it, and all future weeks.

    The returned mapping is ordered by week start.
    """
    current = week_start(today or date.today())
    recent = {current, current - timedelta(weeks=1), current - timedelta(weeks=2)}

    return {
        week: issues_by_week[week]
        for week in sorted(issues_by_week)
        if week in recent or week > current
    }
