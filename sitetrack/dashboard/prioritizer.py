"""
Urgency ordering for SiteTrack list views.

Orders work items by due-date urgency:
    1. (issues view only) critical before non-critical
    2. overdue before not overdue, most overdue first
    3. sooner due before later due
    4. items without a due date last, in input order

Only the calendar date of a due date takes part; time of day is ignored.
Offset-aware due dates are converted to local time before taking the date.
"""

from datetime import date
from functools import cmp_to_key
from typing import Iterable, List, Optional

from sitetrack.core.models import WorkItem

ISSUES_MODE = "issues"
TASKS_MODE = "tasks"


def days_until_due(item: WorkItem, today: Optional[date] = None) -> Optional[int]:
    """
    Whole days from today to the item's due date.

    Args:
        item: Work item to measure
        today: Reference date (defaults to the local current date)

    Returns:
        Negative when overdue, 0 when due today, None when there is no due date
    """
    if item.due_date is None:
        return None
    if today is None:
        today = date.today()
    due = item.due_date
    if due.tzinfo is not None:
        due = due.astimezone()
    return (due.date() - today).days


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_urgency(a: WorkItem, b: WorkItem, mode: str, today: date) -> int:
    """
    Comparator for urgency ordering.

    Returns a negative number when `a` sorts first, positive when `b` sorts
    first and 0 when they are equally urgent.
    """
    if mode == ISSUES_MODE and a.is_critical != b.is_critical:
        return -1 if a.is_critical else 1

    diff_a = days_until_due(a, today)
    diff_b = days_until_due(b, today)

    if diff_a is None or diff_b is None:
        if diff_a is None and diff_b is None:
            return 0
        return 1 if diff_a is None else -1

    overdue_a = diff_a < 0
    overdue_b = diff_b < 0
    if overdue_a != overdue_b:
        return -1 if overdue_a else 1

    return _sign(diff_a - diff_b)


def sort_by_urgency(
    items: Iterable[WorkItem],
    mode: str = TASKS_MODE,
    today: Optional[date] = None,
) -> List[WorkItem]:
    """
    Return a new list ordered by urgency. The sort is stable.

    Args:
        items: Work items to order
        mode: 'issues' to rank critical items first, 'tasks' otherwise
        today: Reference date (defaults to the local current date)
    """
    if today is None:
        today = date.today()
    key = cmp_to_key(lambda a, b: compare_urgency(a, b, mode, today))
    return sorted(items, key=key)
