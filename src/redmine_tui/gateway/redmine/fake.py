"""Fake Redmine gateway for testing TUI components."""

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from redmine_tui.gateway.redmine.abc import RedmineApiError, RedmineGateway
from redmine_tui.gateway.redmine.types import (
    Issue,
    Journal,
    NamedRef,
    Priority,
    Project,
    Status,
    User,
)


class FakeRedmineGateway(RedmineGateway):
    """In-memory implementation of RedmineGateway.

    Returns canned data without making any API calls. Updates are applied
    to the canned issues so that a refetch after a save sees the change,
    and every update payload is recorded for assertions.
    """

    def __init__(
        self,
        *,
        issues: list[Issue] | None = None,
        users: list[User] | None = None,
        projects: list[Project] | None = None,
        statuses: list[Status] | None = None,
        priorities: list[Priority] | None = None,
        current_user: User | None = None,
        fetch_error: str | None = None,
        update_error: str | None = None,
    ) -> None:
        """Initialize with optional canned data.

        Args:
            issues: Issues returned by fetch_issues / fetch_issue
            users: Users returned by fetch_users
            projects: Projects returned by fetch_projects
            statuses: Statuses returned by fetch_statuses
            priorities: Priorities returned by fetch_priorities
            current_user: User returned by fetch_current_user
            fetch_error: If set, every fetch raises RedmineApiError with this message.
                Use to simulate API failures.
            update_error: If set, update_issue raises RedmineApiError with this message
        """
        self._issues = list(issues or [])
        self._users = list(users or [])
        self._projects = list(projects or [])
        self._statuses = list(statuses or [])
        self._priorities = list(priorities or [])
        self._current_user = current_user or make_user(1, "Current User")
        self._fetch_error = fetch_error
        self._update_error = update_error
        self._fetch_issues_calls: list[dict[str, Any]] = []
        self._fetch_issue_calls: list[int] = []
        self._user_fetch_count = 0
        self._project_fetch_count = 0
        self._updates: list[tuple[int, dict[str, Any]]] = []

    def set_fetch_error(self, message: str | None) -> None:
        self._fetch_error = message

    def set_update_error(self, message: str | None) -> None:
        self._update_error = message

    @property
    def fetch_issues_calls(self) -> list[dict[str, Any]]:
        """Keyword arguments of every fetch_issues call, in order."""
        return self._fetch_issues_calls

    @property
    def fetch_issue_calls(self) -> list[int]:
        return self._fetch_issue_calls

    @property
    def user_fetch_count(self) -> int:
        return self._user_fetch_count

    @property
    def project_fetch_count(self) -> int:
        return self._project_fetch_count

    @property
    def updates(self) -> list[tuple[int, dict[str, Any]]]:
        """(issue_id, fields) of every successful or attempted update."""
        return self._updates

    def fetch_issues(
        self,
        *,
        project_id: int | None,
        assigned_to: str | None,
        status_open_only: bool,
        limit: int,
        offset: int,
    ) -> list[Issue]:
        self._fetch_issues_calls.append(
            {
                "project_id": project_id,
                "assigned_to": assigned_to,
                "status_open_only": status_open_only,
                "limit": limit,
                "offset": offset,
            }
        )
        self._raise_if_failing()
        issues = self._issues
        if assigned_to == "me":
            issues = [
                issue
                for issue in issues
                if issue.assigned_to is not None and issue.assigned_to.id == self._current_user.id
            ]
        if project_id is not None:
            issues = [issue for issue in issues if issue.project.id == project_id]
        return issues[offset : offset + limit]

    def fetch_issue(self, issue_id: int) -> Issue:
        self._fetch_issue_calls.append(issue_id)
        self._raise_if_failing()
        for issue in self._issues:
            if issue.id == issue_id:
                return issue
        raise RedmineApiError(status_code=404, message=f"Issue {issue_id} not found")

    def fetch_users(self, *, limit: int, offset: int) -> list[User]:
        self._user_fetch_count += 1
        self._raise_if_failing()
        return self._users[offset : offset + limit]

    def fetch_projects(self, *, limit: int, offset: int) -> list[Project]:
        self._project_fetch_count += 1
        self._raise_if_failing()
        return self._projects[offset : offset + limit]

    def fetch_statuses(self) -> list[Status]:
        self._raise_if_failing()
        return self._statuses

    def fetch_priorities(self) -> list[Priority]:
        self._raise_if_failing()
        return self._priorities

    def fetch_current_user(self) -> User:
        self._raise_if_failing()
        return self._current_user

    def update_issue(self, issue_id: int, fields: dict[str, Any]) -> None:
        self._updates.append((issue_id, dict(fields)))
        if self._update_error is not None:
            raise RedmineApiError(status_code=422, message=self._update_error)
        self._issues = [
            _apply_update(issue, fields, self) if issue.id == issue_id else issue
            for issue in self._issues
        ]

    def status_by_id(self, status_id: int) -> Status | None:
        return next((s for s in self._statuses if s.id == status_id), None)

    def _raise_if_failing(self) -> None:
        if self._fetch_error is not None:
            raise RedmineApiError(status_code=500, message=self._fetch_error)


def _apply_update(issue: Issue, fields: dict[str, Any], gateway: FakeRedmineGateway) -> Issue:
    """Apply the subset of update fields the fake understands."""
    updated = issue
    if "subject" in fields:
        updated = replace(updated, subject=fields["subject"])
    if "description" in fields:
        updated = replace(updated, description=fields["description"])
    if "done_ratio" in fields:
        updated = replace(updated, done_ratio=fields["done_ratio"])
    if "due_date" in fields:
        updated = replace(updated, due_date=fields["due_date"])
    if "status_id" in fields:
        status = gateway.status_by_id(fields["status_id"])
        if status is not None:
            updated = replace(updated, status=NamedRef(id=status.id, name=status.name))
    return updated


def make_user(user_id: int, name: str, *, login: str = "") -> User:
    """Create a User for tests."""
    return User(id=user_id, name=name, login=login, firstname="", lastname="")


def make_issue(
    issue_id: int,
    subject: str,
    *,
    assignee: tuple[int, str] | None = None,
    project: tuple[int, str] = (1, "Project One"),
    status: tuple[int, str] = (1, "New"),
    priority: tuple[int, str] = (2, "Normal"),
    description: str = "",
    done_ratio: int = 0,
    due_date: str | None = None,
    journals: tuple[Journal, ...] = (),
) -> Issue:
    """Create an Issue with sensible defaults for tests.

    Args:
        issue_id: Issue number
        subject: Issue subject
        assignee: (user_id, name) of the assignee, None for unassigned
        project: (project_id, name)
        status: (status_id, name)
        priority: (priority_id, name)
        description: Issue description
        done_ratio: Progress percentage
        due_date: Due date as YYYY-MM-DD
        journals: Change history entries

    Returns:
        Issue populated with the given values
    """
    timestamp = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
    return Issue(
        id=issue_id,
        subject=subject,
        description=description,
        status=NamedRef(id=status[0], name=status[1]),
        priority=NamedRef(id=priority[0], name=priority[1]),
        project=NamedRef(id=project[0], name=project[1]),
        tracker=NamedRef(id=1, name="Bug"),
        author=NamedRef(id=1, name="Current User"),
        assigned_to=NamedRef(id=assignee[0], name=assignee[1]) if assignee is not None else None,
        done_ratio=done_ratio,
        start_date=None,
        due_date=due_date,
        created_on=timestamp,
        updated_on=timestamp,
        journals=journals,
    )
