"""
Record normalizer for SiteTrack.

Backend task and issue payloads name the same concept in several ways
(`taskName` vs `title` vs `issueTitle`, `percent` vs `progress`, nested
`project` objects vs flat `projectName` strings, string-encoded booleans and
dates). Each canonical field is resolved from an ordered list of accessor
functions; the first accessor that yields a present value wins.

A value is "present" when it is not None and not a blank string. Progress
is the exception: a numeric zero `percent` falls through to `progress`.
"""

import json
import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from dateutil import parser as date_parser

from .errors import MalformedRecord
from .models import ISSUE, TASK, NormalizationReport, WorkItem

logger = logging.getLogger(__name__)

Accessor = Callable[[Dict[str, Any]], Any]

UNTITLED = "untitled"


# =============================================================================
# Accessor builders
# =============================================================================

def _key(name: str) -> Accessor:
    return lambda raw: raw.get(name)


def _nested(outer: str, inner: str) -> Accessor:
    def get(raw: Dict[str, Any]) -> Any:
        value = raw.get(outer)
        return value.get(inner) if isinstance(value, dict) else None
    return get


def _nonzero(name: str) -> Accessor:
    def get(raw: Dict[str, Any]) -> Any:
        value = raw.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if value == 0 or math.isnan(value):
                return None
        return value
    return get


def _string_only(name: str) -> Accessor:
    def get(raw: Dict[str, Any]) -> Any:
        value = raw.get(name)
        return value if isinstance(value, str) else None
    return get


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def first_present(raw: Dict[str, Any], accessors: Sequence[Accessor]) -> Any:
    """Return the first present value produced by `accessors`, else None."""
    for accessor in accessors:
        value = accessor(raw)
        if _is_present(value):
            return value
    return None


ID_ACCESSORS = (_key("id"), _key("_id"), _key("taskId"), _key("issueId"))
TITLE_ACCESSORS = (_key("taskName"), _key("title"), _key("issueTitle"), _key("name"))
PROJECT_NAME_ACCESSORS = (
    _nested("project", "projectName"),
    _string_only("project"),
    _key("projectName"),
)
PROJECT_ID_ACCESSORS = (_key("projectId"), _nested("project", "id"), _nested("project", "_id"))
DATE_ACCESSORS = (_key("date"), _key("dueDate"), _key("endDate"))
# A zero `percent` defers to `progress`.
PROGRESS_ACCESSORS = (_nonzero("percent"), _key("progress"))
CREATOR_ACCESSORS = (
    _key("creatorName"),
    _string_only("createdBy"),
    _nested("createdBy", "name"),
    _nested("creator", "name"),
    _nested("creator", "username"),
)
STATUS_ACCESSORS = (_key("status"), _key("issueStatus"))
ASSIGNEE_ACCESSORS = (
    _key("assignedUserIds"),
    _key("assignTo"),
    _key("assignToUserId"),
    _key("assignedUserId"),
    _key("assignedTo"),
    _key("assignedUserDetails"),
)
DEPENDENCY_ACCESSORS = (_key("dependentTaskIds"), _key("dependencies"))
DESCRIPTION_ACCESSORS = (_key("desc"), _key("description"))
LOCATION_ACCESSORS = (_key("location"), _nested("project", "location"), _key("projectLocation"))


# =============================================================================
# Value coercion
# =============================================================================

def as_bool(value: Any) -> bool:
    """Interpret JSON booleans and their string/number encodings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, (int, float)):
        return value == 1
    return False


def as_id(value: Any) -> Optional[str]:
    """Coerce an identifier (or a user/task object carrying one) to str."""
    if isinstance(value, dict):
        value = first_present(value, (_key("userId"), _key("id"), _key("_id"), _key("taskId")))
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def as_id_list(value: Any) -> List[str]:
    """Coerce a scalar, list, or JSON/comma encoded list into ordered unique ids."""
    if value is None:
        return []
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("["):
            try:
                value = json.loads(text)
            except json.JSONDecodeError:
                value = text.strip("[]").split(",")
        else:
            value = text.split(",")
    if not isinstance(value, (list, tuple, set, frozenset)):
        value = [value]

    ids: List[str] = []
    for entry in value:
        entry_id = as_id(entry.strip() if isinstance(entry, str) else entry)
        if entry_id is not None and entry_id not in ids:
            ids.append(entry_id)
    return ids


def parse_date(value: Any) -> Optional[datetime]:
    """
    Parse a date from an ISO string, free-form string, epoch milliseconds,
    or date object. Unparseable input yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date_parser.parse(text)
        except (ValueError, OverflowError, TypeError):
            return None
    return None


def clamp_progress(value: Any) -> int:
    """Convert a progress value into an int percentage in [0, 100]."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return 0
    if not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and math.isnan(value):
        return 0
    clamped = max(0.0, min(100.0, float(value)))
    # floor: only a real 100 counts as complete
    return int(math.floor(clamped))


def _as_text(value: Any) -> Optional[str]:
    if not _is_present(value) or isinstance(value, (dict, list)):
        return None
    return str(value).strip()


# =============================================================================
# Public API
# =============================================================================

def normalize(raw: Any, kind_hint: Optional[str] = None) -> WorkItem:
    """
    Map a raw task/issue payload onto a WorkItem.

    Pure and total: missing or malformed fields fall back to safe defaults
    and nothing is raised. A record without a resolvable id comes back with
    `id=None`; bulk callers report it as a MalformedRecord.

    Args:
        raw: Parsed JSON object from the backend
        kind_hint: 'issue' when the caller iterates an issues collection

    Returns:
        Normalized WorkItem
    """
    if not isinstance(raw, dict):
        raw = {}

    item_id = as_id(first_present(raw, ID_ACCESSORS))
    kind = ISSUE if kind_hint == ISSUE or as_bool(raw.get("isIssue")) else TASK

    status = _as_text(first_present(raw, STATUS_ACCESSORS))

    dependency_ids = as_id_list(first_present(raw, DEPENDENCY_ACCESSORS))
    declares_self = item_id is not None and item_id in dependency_ids
    if declares_self:
        dependency_ids = [dep for dep in dependency_ids if dep != item_id]

    return WorkItem(
        id=item_id,
        kind=kind,
        title=_as_text(first_present(raw, TITLE_ACCESSORS)) or UNTITLED,
        project_name=_as_text(first_present(raw, PROJECT_NAME_ACCESSORS)),
        progress_percent=clamp_progress(first_present(raw, PROGRESS_ACCESSORS)),
        status=status.lower() if status else None,
        due_date=parse_date(first_present(raw, DATE_ACCESSORS)),
        is_critical=as_bool(raw.get("isCritical")),
        creator_name=_as_text(first_present(raw, CREATOR_ACCESSORS)),
        assigned_user_ids=tuple(as_id_list(first_present(raw, ASSIGNEE_ACCESSORS))),
        dependent_item_ids=frozenset(dependency_ids),
        description=_as_text(first_present(raw, DESCRIPTION_ACCESSORS)),
        location=_as_text(first_present(raw, LOCATION_ACCESSORS)),
        project_id=as_id(first_present(raw, PROJECT_ID_ACCESSORS)),
        created_at=parse_date(raw.get("createdAt")),
        declares_self_dependency=declares_self,
    )


def normalize_many(raws: Optional[Iterable[Any]], kind_hint: Optional[str] = None) -> NormalizationReport:
    """
    Normalize a collection of raw records.

    Records without an id are skipped and collected in `errors`. A record
    whose (kind, id) was already seen replaces the earlier item in place.
    """
    report = NormalizationReport()
    positions: Dict[tuple, int] = {}

    for raw in raws or []:
        item = normalize(raw, kind_hint)
        if item.id is None:
            report.errors.append(MalformedRecord(raw))
            logger.warning("Skipping %s record without a resolvable id", item.kind)
            continue

        key = (item.kind, item.id)
        if key in positions:
            report.items[positions[key]] = item
        else:
            positions[key] = len(report.items)
            report.items.append(item)

    return report
