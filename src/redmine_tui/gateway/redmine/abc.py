"""Gateway ABC for the Redmine REST API."""

from abc import ABC, abstractmethod
from typing import Any

from redmine_tui.gateway.redmine.types import Issue, Priority, Project, Status, User


class RedmineError(Exception):
    """Base class for transport failures talking to Redmine."""


class RedmineApiError(RedmineError):
    """Redmine answered with an HTTP error status."""

    def __init__(self, *, status_code: int, message: str) -> None:
        super().__init__(f"API request failed with status {status_code}: {message}")
        self.status_code = status_code


class RedmineConnectionError(RedmineError):
    """The request never produced an HTTP response (DNS, refused, timeout, bad JSON)."""


class RedmineGateway(ABC):
    """Abstract interface to a Redmine server.

    Every method may raise RedmineError. Callers in the TUI run these
    blocking calls off the event loop and turn failures into result events.
    """

    @abstractmethod
    def fetch_issues(
        self,
        *,
        project_id: int | None,
        assigned_to: str | None,
        status_open_only: bool,
        limit: int,
        offset: int,
    ) -> list[Issue]:
        """Fetch a page of issues.

        Args:
            project_id: Restrict to one project, None for all projects
            assigned_to: "me", a user ID as a string, or None for anyone
            status_open_only: Only return issues with an open status
            limit: Page size
            offset: Number of issues to skip

        Returns:
            Issues in server order
        """
        ...

    @abstractmethod
    def fetch_issue(self, issue_id: int) -> Issue:
        """Fetch a single issue including its journals.

        Args:
            issue_id: The issue number

        Returns:
            The issue with change history populated
        """
        ...

    @abstractmethod
    def fetch_users(self, *, limit: int, offset: int) -> list[User]:
        """Fetch a page of users (requires admin rights on most servers)."""
        ...

    @abstractmethod
    def fetch_projects(self, *, limit: int, offset: int) -> list[Project]:
        """Fetch a page of projects visible to the API key."""
        ...

    @abstractmethod
    def fetch_statuses(self) -> list[Status]:
        """Fetch all issue statuses."""
        ...

    @abstractmethod
    def fetch_priorities(self) -> list[Priority]:
        """Fetch all issue priority enumeration values."""
        ...

    @abstractmethod
    def fetch_current_user(self) -> User:
        """Fetch the user that owns the API key."""
        ...

    @abstractmethod
    def update_issue(self, issue_id: int, fields: dict[str, Any]) -> None:
        """Apply field changes to an issue in one request.

        Args:
            issue_id: The issue number
            fields: Redmine issue attributes (e.g. {"status_id": 3}); a None
                value clears the attribute
        """
        ...
