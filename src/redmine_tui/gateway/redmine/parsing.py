"""Conversion of Redmine JSON payloads into gateway types."""

from datetime import datetime
from typing import Any

from redmine_tui.gateway.redmine.types import (
    Issue,
    Journal,
    JournalDetail,
    NamedRef,
    Priority,
    Project,
    Status,
    User,
)

_UNKNOWN_REF = NamedRef(id=0, name="")


def parse_datetime(value: object) -> datetime | None:
    """Parse a Redmine ISO-8601 timestamp such as ``2024-01-05T10:00:00Z``.

    Returns None for missing or malformed values rather than failing the
    whole payload.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_ref(data: object) -> NamedRef:
    if not isinstance(data, dict):
        return _UNKNOWN_REF
    return NamedRef(id=int(data.get("id", 0)), name=str(data.get("name", "")))


def parse_optional_ref(data: object) -> NamedRef | None:
    if not isinstance(data, dict):
        return None
    return parse_ref(data)


def parse_journal(data: dict[str, Any]) -> Journal:
    details = tuple(
        JournalDetail(
            property=str(detail.get("property", "")),
            name=str(detail.get("name", "")),
            old_value=_str_or_empty(detail.get("old_value")),
            new_value=_str_or_empty(detail.get("new_value")),
        )
        for detail in data.get("details", [])
        if isinstance(detail, dict)
    )
    return Journal(
        id=int(data.get("id", 0)),
        user=parse_ref(data.get("user")),
        notes=_str_or_empty(data.get("notes")),
        created_on=parse_datetime(data.get("created_on")),
        details=details,
    )


def parse_issue(data: dict[str, Any]) -> Issue:
    """Convert a Redmine issue object into an Issue.

    Args:
        data: One element of ``issues`` or the ``issue`` object of a
            single-issue response

    Returns:
        Parsed Issue. Missing optional fields get empty defaults.
    """
    journals = tuple(
        parse_journal(journal) for journal in data.get("journals", []) if isinstance(journal, dict)
    )
    return Issue(
        id=int(data["id"]),
        subject=_str_or_empty(data.get("subject")),
        description=_str_or_empty(data.get("description")),
        status=parse_ref(data.get("status")),
        priority=parse_ref(data.get("priority")),
        project=parse_ref(data.get("project")),
        tracker=parse_ref(data.get("tracker")),
        author=parse_ref(data.get("author")),
        assigned_to=parse_optional_ref(data.get("assigned_to")),
        done_ratio=int(data.get("done_ratio") or 0),
        start_date=data.get("start_date") or None,
        due_date=data.get("due_date") or None,
        created_on=parse_datetime(data.get("created_on")),
        updated_on=parse_datetime(data.get("updated_on")),
        journals=journals,
    )


def parse_user(data: dict[str, Any]) -> User:
    return User(
        id=int(data["id"]),
        name=_str_or_empty(data.get("name")),
        login=_str_or_empty(data.get("login")),
        firstname=_str_or_empty(data.get("firstname")),
        lastname=_str_or_empty(data.get("lastname")),
    )


def parse_project(data: dict[str, Any]) -> Project:
    return Project(id=int(data["id"]), name=_str_or_empty(data.get("name")))


def parse_status(data: dict[str, Any]) -> Status:
    return Status(id=int(data["id"]), name=_str_or_empty(data.get("name")))


def parse_priority(data: dict[str, Any]) -> Priority:
    return Priority(id=int(data["id"]), name=_str_or_empty(data.get("name")))


def _str_or_empty(value: object) -> str:
    if value is None:
        return ""
    return str(value)
