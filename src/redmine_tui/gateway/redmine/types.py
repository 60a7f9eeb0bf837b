"""Data types for Redmine API entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class NamedRef:
    """Reference to a named Redmine entity embedded in another record.

    Redmine embeds statuses, priorities, projects, trackers and users
    inside issues as ``{"id": ..., "name": ...}`` pairs.

    Attributes:
        id: Entity identifier
        name: Human-readable name
    """

    id: int
    name: str


@dataclass(frozen=True)
class User:
    """A Redmine user as returned by ``/users.json``.

    Attributes:
        id: User identifier
        name: Full name (may be empty for some Redmine versions)
        login: Login name, empty if not exposed
        firstname: First name, empty if not exposed
        lastname: Last name, empty if not exposed
    """

    id: int
    name: str
    login: str
    firstname: str
    lastname: str

    @property
    def display_name(self) -> str:
        """Name shown in the UI, falling back through the available fields."""
        if self.name:
            return self.name
        if self.firstname or self.lastname:
            return f"{self.firstname} {self.lastname}".strip()
        if self.login:
            return self.login
        return f"User {self.id}"


@dataclass(frozen=True)
class Project:
    """A Redmine project."""

    id: int
    name: str


@dataclass(frozen=True)
class Status:
    """An issue status (e.g. "New", "In Progress", "Closed")."""

    id: int
    name: str


@dataclass(frozen=True)
class Priority:
    """An issue priority enumeration value."""

    id: int
    name: str


@dataclass(frozen=True)
class JournalDetail:
    """A single property change recorded in a journal entry.

    Attributes:
        property: Kind of property ("attr", "cf", "attachment", ...)
        name: Changed property name (e.g. "status_id")
        old_value: Previous value, empty if none
        new_value: New value, empty if none
    """

    property: str
    name: str
    old_value: str
    new_value: str


@dataclass(frozen=True)
class Journal:
    """A change-history entry on an issue."""

    id: int
    user: NamedRef
    notes: str
    created_on: datetime | None
    details: tuple[JournalDetail, ...]


@dataclass(frozen=True)
class Issue:
    """A Redmine issue.

    Immutable: a successful edit replaces the local copy with the
    server's refetched representation.

    Attributes:
        id: Issue number
        subject: One-line title
        description: Long description, empty if none
        status: Current status
        priority: Current priority
        project: Owning project
        tracker: Tracker (Bug, Feature, ...)
        author: User who created the issue
        assigned_to: Assignee, None if unassigned
        done_ratio: Progress percentage, 0-100
        start_date: Start date as YYYY-MM-DD, None if unset
        due_date: Due date as YYYY-MM-DD, None if unset
        created_on: Creation timestamp
        updated_on: Last update timestamp
        journals: Change history, only populated by single-issue fetches
    """

    id: int
    subject: str
    description: str
    status: NamedRef
    priority: NamedRef
    project: NamedRef
    tracker: NamedRef
    author: NamedRef
    assigned_to: NamedRef | None
    done_ratio: int
    start_date: str | None
    due_date: str | None
    created_on: datetime | None
    updated_on: datetime | None
    journals: tuple[Journal, ...]
