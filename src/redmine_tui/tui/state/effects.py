"""Effects requested by the state machine and executed by the app."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from redmine_tui.tui.state.types import IssueQuery


@dataclass(frozen=True)
class FetchIssues:
    """Fetch the issue list; the result carries the same generation."""

    generation: int
    query: IssueQuery


@dataclass(frozen=True)
class FetchIssueDetail:
    """Fetch one issue with journals; the result carries the same generation."""

    generation: int
    issue_id: int


@dataclass(frozen=True)
class FetchUsers:
    pass


@dataclass(frozen=True)
class FetchProjects:
    pass


@dataclass(frozen=True)
class FetchStatuses:
    pass


@dataclass(frozen=True)
class FetchPriorities:
    pass


@dataclass(frozen=True)
class FetchCurrentUser:
    pass


@dataclass(frozen=True)
class SubmitIssueUpdate:
    """Send one atomic update of the given fields.

    generation tags the save so that a late result cannot touch a newer
    edit session.
    """

    generation: int
    issue_id: int
    fields: dict[str, Any]


@dataclass(frozen=True)
class QuitApp:
    pass


Effect = (
    FetchIssues
    | FetchIssueDetail
    | FetchUsers
    | FetchProjects
    | FetchStatuses
    | FetchPriorities
    | FetchCurrentUser
    | SubmitIssueUpdate
    | QuitApp
)
