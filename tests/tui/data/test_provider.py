"""Tests for RedmineDataProvider."""

from redmine_tui.gateway.redmine.fake import FakeRedmineGateway, make_issue, make_user
from redmine_tui.gateway.redmine.types import Priority, Project, Status
from redmine_tui.tui.data.provider import MAX_PAGES, RedmineDataProvider, fetch_all_pages
from redmine_tui.tui.state.effects import (
    FetchCurrentUser,
    FetchIssueDetail,
    FetchIssues,
    FetchPriorities,
    FetchProjects,
    FetchStatuses,
    FetchUsers,
    QuitApp,
    SubmitIssueUpdate,
)
from redmine_tui.tui.state.events import (
    CatalogFailed,
    CatalogKind,
    CurrentUserLoaded,
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
from redmine_tui.tui.state.types import IssueQuery

ALL_OPEN = IssueQuery(project_id=None, assigned_to=None, status_open_only=True)
MINE_OPEN = IssueQuery(project_id=None, assigned_to="me", status_open_only=True)


def test_fetch_all_pages_stops_at_short_page() -> None:
    """Paging stops as soon as a page comes back short."""
    data = list(range(25))
    calls: list[tuple[int, int]] = []

    def fetch_page(limit: int, offset: int) -> list[int]:
        calls.append((limit, offset))
        return data[offset : offset + limit]

    assert fetch_all_pages(fetch_page, limit=10, max_pages=MAX_PAGES) == data
    assert calls == [(10, 0), (10, 10), (10, 20)]


def test_fetch_all_pages_respects_page_cap() -> None:
    """Paging never makes more than max_pages requests."""
    calls: list[int] = []

    def fetch_page(limit: int, offset: int) -> list[int]:
        calls.append(offset)
        return [0] * limit

    assert len(fetch_all_pages(fetch_page, limit=5, max_pages=3)) == 15
    assert calls == [0, 5, 10]


def test_fetch_issues_passes_query_and_generation() -> None:
    """The query reaches the gateway and the result carries the generation."""
    gateway = FakeRedmineGateway(
        issues=[make_issue(1, "Mine", assignee=(1, "Current User")), make_issue(2, "Other")]
    )
    provider = RedmineDataProvider(gateway)

    result = provider.execute(FetchIssues(generation=4, query=MINE_OPEN))

    assert isinstance(result, IssuesLoaded)
    assert result.generation == 4
    assert [issue.id for issue in result.issues] == [1]
    assert gateway.fetch_issues_calls == [
        {
            "project_id": None,
            "assigned_to": "me",
            "status_open_only": True,
            "limit": 100,
            "offset": 0,
        }
    ]


def test_fetch_issues_pages_through_results() -> None:
    """Lists longer than one page are fetched page by page."""
    gateway = FakeRedmineGateway(issues=[make_issue(i, f"Issue {i}") for i in range(1, 6)])
    provider = RedmineDataProvider(gateway, page_limit=2)

    result = provider.execute(FetchIssues(generation=1, query=ALL_OPEN))

    assert isinstance(result, IssuesLoaded)
    assert len(result.issues) == 5
    assert [call["offset"] for call in gateway.fetch_issues_calls] == [0, 2, 4]


def test_fetch_failures_become_events() -> None:
    """Gateway errors are returned as failure events, never raised."""
    provider = RedmineDataProvider(FakeRedmineGateway(fetch_error="server down"))

    issues = provider.execute(FetchIssues(generation=2, query=ALL_OPEN))
    detail = provider.execute(FetchIssueDetail(generation=3, issue_id=9))
    users = provider.execute(FetchUsers())

    assert isinstance(issues, IssuesFailed)
    assert issues.generation == 2
    assert "server down" in issues.message
    assert isinstance(detail, IssueDetailFailed)
    assert detail.issue_id == 9
    assert isinstance(users, CatalogFailed)
    assert users.kind == CatalogKind.USERS


def test_catalogs() -> None:
    """Each catalog effect yields its loaded event."""
    gateway = FakeRedmineGateway(
        users=[make_user(1, "Alice")],
        projects=[Project(id=1, name="Web")],
        statuses=[Status(id=1, name="New")],
        priorities=[Priority(id=2, name="Normal")],
        current_user=make_user(5, "Me"),
    )
    provider = RedmineDataProvider(gateway)

    assert provider.execute(FetchUsers()) == UsersLoaded(users=(make_user(1, "Alice"),))
    assert provider.execute(FetchProjects()) == ProjectsLoaded(projects=(Project(id=1, name="Web"),))
    assert provider.execute(FetchStatuses()) == StatusesLoaded(statuses=(Status(id=1, name="New"),))
    assert provider.execute(FetchPriorities()) == PrioritiesLoaded(
        priorities=(Priority(id=2, name="Normal"),)
    )
    assert provider.execute(FetchCurrentUser()) == CurrentUserLoaded(user=make_user(5, "Me"))


def test_issue_detail() -> None:
    """A detail fetch returns the issue tagged with its generation."""
    issue = make_issue(3, "Three")
    provider = RedmineDataProvider(FakeRedmineGateway(issues=[issue]))

    assert provider.execute(FetchIssueDetail(generation=7, issue_id=3)) == IssueDetailLoaded(
        generation=7, issue=issue
    )


def test_submit_update() -> None:
    """Updates report success or the server's rejection."""
    gateway = FakeRedmineGateway(issues=[make_issue(1, "Old")])
    provider = RedmineDataProvider(gateway)

    ok = provider.execute(SubmitIssueUpdate(generation=1, issue_id=1, fields={"subject": "New"}))
    gateway.set_update_error("Subject cannot be blank")
    failed = provider.execute(SubmitIssueUpdate(generation=2, issue_id=1, fields={"subject": ""}))

    assert ok == IssueUpdated(generation=1, issue_id=1)
    assert isinstance(failed, IssueUpdateFailed)
    assert "Subject cannot be blank" in failed.message
    assert gateway.updates == [(1, {"subject": "New"}), (1, {"subject": ""})]


def test_quit_has_no_result() -> None:
    """Effects handled by the app itself produce nothing."""
    assert RedmineDataProvider(FakeRedmineGateway()).execute(QuitApp()) is None
