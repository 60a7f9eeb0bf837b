"""Data provider that executes state machine effects against Redmine.

Each effect maps to one or more blocking gateway calls. The provider turns
the outcome into a result event, so transport failures reach the state
machine as events instead of exceptions.
"""

import logging
from collections.abc import Callable
from typing import TypeVar

from redmine_tui.gateway.redmine.abc import RedmineError, RedmineGateway
from redmine_tui.tui.state.effects import (
    Effect,
    FetchCurrentUser,
    FetchIssueDetail,
    FetchIssues,
    FetchPriorities,
    FetchProjects,
    FetchStatuses,
    FetchUsers,
    SubmitIssueUpdate,
)
from redmine_tui.tui.state.events import (
    CatalogFailed,
    CatalogKind,
    CurrentUserLoaded,
    Event,
    IssueDetailFailed,
    IssueDetailLoaded,
    IssuesFailed,
    IssuesLoaded,
    IssueUpdated,
    IssueUpdateFailed,
    PrioritiesLoaded,
    ProjectsLoaded,
    StatusesLoaded,
    UsersLoaded,
)
from redmine_tui.tui.state.types import ISSUE_PAGE_LIMIT

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PAGES = 10


def fetch_all_pages(
    fetch_page: Callable[[int, int], list[T]],
    *,
    limit: int,
    max_pages: int,
) -> list[T]:
    """Collect results page by page until a short page or the page cap.

    Args:
        fetch_page: Called with (limit, offset), returns one page
        limit: Page size
        max_pages: Upper bound on the number of requests

    Returns:
        Concatenated pages in server order
    """
    results: list[T] = []
    for page in range(max_pages):
        batch = fetch_page(limit, page * limit)
        results.extend(batch)
        if len(batch) < limit:
            break
    return results


class RedmineDataProvider:
    """Executes effects with a RedmineGateway and reports results as events."""

    def __init__(self, gateway: RedmineGateway, *, page_limit: int = ISSUE_PAGE_LIMIT) -> None:
        """Initialize the provider.

        Args:
            gateway: Redmine gateway (real or fake)
            page_limit: Page size for list requests
        """
        self._gateway = gateway
        self._page_limit = page_limit

    def execute(self, effect: Effect) -> Event | None:
        """Run one effect. Blocks on network I/O; call from a worker thread.

        Args:
            effect: Any effect except QuitApp

        Returns:
            The result event, or None for effects without a result
        """
        if isinstance(effect, FetchIssues):
            return self._fetch_issues(effect)
        if isinstance(effect, FetchIssueDetail):
            return self._fetch_issue_detail(effect)
        if isinstance(effect, FetchUsers):
            return self._fetch_catalog(CatalogKind.USERS, self._load_users)
        if isinstance(effect, FetchProjects):
            return self._fetch_catalog(CatalogKind.PROJECTS, self._load_projects)
        if isinstance(effect, FetchStatuses):
            return self._fetch_catalog(
                CatalogKind.STATUSES,
                lambda: StatusesLoaded(statuses=tuple(self._gateway.fetch_statuses())),
            )
        if isinstance(effect, FetchPriorities):
            return self._fetch_catalog(
                CatalogKind.PRIORITIES,
                lambda: PrioritiesLoaded(priorities=tuple(self._gateway.fetch_priorities())),
            )
        if isinstance(effect, FetchCurrentUser):
            return self._fetch_catalog(
                CatalogKind.CURRENT_USER,
                lambda: CurrentUserLoaded(user=self._gateway.fetch_current_user()),
            )
        if isinstance(effect, SubmitIssueUpdate):
            return self._submit_update(effect)
        return None

    def _fetch_issues(self, effect: FetchIssues) -> Event:
        query = effect.query
        try:
            issues = fetch_all_pages(
                lambda limit, offset: self._gateway.fetch_issues(
                    project_id=query.project_id,
                    assigned_to=query.assigned_to,
                    status_open_only=query.status_open_only,
                    limit=limit,
                    offset=offset,
                ),
                limit=self._page_limit,
                max_pages=MAX_PAGES,
            )
        except RedmineError as e:
            return IssuesFailed(generation=effect.generation, message=str(e))
        logger.debug("Fetched %d issues (generation %d)", len(issues), effect.generation)
        return IssuesLoaded(generation=effect.generation, issues=tuple(issues))

    def _fetch_issue_detail(self, effect: FetchIssueDetail) -> Event:
        try:
            issue = self._gateway.fetch_issue(effect.issue_id)
        except RedmineError as e:
            return IssueDetailFailed(
                generation=effect.generation, issue_id=effect.issue_id, message=str(e)
            )
        return IssueDetailLoaded(generation=effect.generation, issue=issue)

    def _load_users(self) -> Event:
        users = fetch_all_pages(
            lambda limit, offset: self._gateway.fetch_users(limit=limit, offset=offset),
            limit=self._page_limit,
            max_pages=MAX_PAGES,
        )
        return UsersLoaded(users=tuple(users))

    def _load_projects(self) -> Event:
        projects = fetch_all_pages(
            lambda limit, offset: self._gateway.fetch_projects(limit=limit, offset=offset),
            limit=self._page_limit,
            max_pages=MAX_PAGES,
        )
        return ProjectsLoaded(projects=tuple(projects))

    def _fetch_catalog(self, kind: CatalogKind, load: Callable[[], Event]) -> Event:
        try:
            return load()
        except RedmineError as e:
            return CatalogFailed(kind=kind, message=str(e))

    def _submit_update(self, effect: SubmitIssueUpdate) -> Event:
        try:
            self._gateway.update_issue(effect.issue_id, effect.fields)
        except RedmineError as e:
            return IssueUpdateFailed(
                generation=effect.generation, issue_id=effect.issue_id, message=str(e)
            )
        return IssueUpdated(generation=effect.generation, issue_id=effect.issue_id)
