"""Events consumed by the state machine.

Operator events are produced by the app's key handling; result events are
produced by the effect runner when a gateway call finishes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from redmine_tui.gateway.redmine.types import Issue, Priority, Project, Status, User


class CatalogKind(Enum):
    """Reference data the session caches."""

    USERS = auto()
    PROJECTS = auto()
    STATUSES = auto()
    PRIORITIES = auto()
    CURRENT_USER = auto()


# Lifecycle


@dataclass(frozen=True)
class Started:
    pass


@dataclass(frozen=True)
class Resized:
    """The list pane changed size.

    Attributes:
        page_size: Number of issues that fit in the list pane
    """

    page_size: int


@dataclass(frozen=True)
class Quit:
    pass


# Navigation, shared by the list, the pickers and select fields


@dataclass(frozen=True)
class CursorUp:
    pass


@dataclass(frozen=True)
class CursorDown:
    pass


@dataclass(frozen=True)
class CursorHome:
    pass


@dataclass(frozen=True)
class CursorEnd:
    pass


@dataclass(frozen=True)
class PageUp:
    pass


@dataclass(frozen=True)
class PageDown:
    pass


# Text entry, shared by the filter input, the pickers and the editor


@dataclass(frozen=True)
class TextInput:
    """Printable text typed by the operator."""

    text: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class Confirm:
    """Enter: confirm the filter, apply the picker or advance the editor."""


@dataclass(frozen=True)
class Cancel:
    """Escape: leave the active mode without applying its input."""


# Browse commands


@dataclass(frozen=True)
class StartTextFilter:
    pass


@dataclass(frozen=True)
class OpenUserPicker:
    pass


@dataclass(frozen=True)
class OpenProjectPicker:
    pass


@dataclass(frozen=True)
class ToggleScope:
    pass


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class StartEdit:
    pass


# Picker and edit commands


@dataclass(frozen=True)
class TogglePickerItem:
    pass


@dataclass(frozen=True)
class NextField:
    pass


@dataclass(frozen=True)
class PreviousField:
    pass


@dataclass(frozen=True)
class SaveEdit:
    pass


# Transport results


@dataclass(frozen=True)
class IssuesLoaded:
    generation: int
    issues: tuple[Issue, ...]


@dataclass(frozen=True)
class IssuesFailed:
    generation: int
    message: str


@dataclass(frozen=True)
class IssueDetailLoaded:
    generation: int
    issue: Issue


@dataclass(frozen=True)
class IssueDetailFailed:
    generation: int
    issue_id: int
    message: str


@dataclass(frozen=True)
class UsersLoaded:
    users: tuple[User, ...]


@dataclass(frozen=True)
class ProjectsLoaded:
    projects: tuple[Project, ...]


@dataclass(frozen=True)
class StatusesLoaded:
    statuses: tuple[Status, ...]


@dataclass(frozen=True)
class PrioritiesLoaded:
    priorities: tuple[Priority, ...]


@dataclass(frozen=True)
class CurrentUserLoaded:
    user: User


@dataclass(frozen=True)
class CatalogFailed:
    kind: CatalogKind
    message: str


@dataclass(frozen=True)
class IssueUpdated:
    generation: int
    issue_id: int


@dataclass(frozen=True)
class IssueUpdateFailed:
    generation: int
    issue_id: int
    message: str


Event = (
    Started
    | Resized
    | Quit
    | CursorUp
    | CursorDown
    | CursorHome
    | CursorEnd
    | PageUp
    | PageDown
    | TextInput
    | Backspace
    | Confirm
    | Cancel
    | StartTextFilter
    | OpenUserPicker
    | OpenProjectPicker
    | ToggleScope
    | Refresh
    | StartEdit
    | TogglePickerItem
    | NextField
    | PreviousField
    | SaveEdit
    | IssuesLoaded
    | IssuesFailed
    | IssueDetailLoaded
    | IssueDetailFailed
    | UsersLoaded
    | ProjectsLoaded
    | StatusesLoaded
    | PrioritiesLoaded
    | CurrentUserLoaded
    | CatalogFailed
    | IssueUpdated
    | IssueUpdateFailed
)
