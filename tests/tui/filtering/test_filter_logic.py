"""Tests for issue filtering and the filter banner."""

from redmine_tui.gateway.redmine.fake import make_issue, make_user
from redmine_tui.gateway.redmine.types import Project
from redmine_tui.tui.filtering.logic import build_filter_banner, filter_issues

ISSUES = [
    make_issue(1, "Login page broken", assignee=(10, "Alice"), project=(100, "Web")),
    make_issue(2, "Crash on export", assignee=(20, "Bob"), project=(100, "Web")),
    make_issue(3, "Write release notes", assignee=None, project=(200, "Docs")),
]


def _ids(issues: list) -> list[int]:
    return [issue.id for issue in issues]


def test_no_filter_returns_all_in_order() -> None:
    """With no filter active every issue is returned in server order."""
    assert _ids(filter_issues(ISSUES, set(), set(), "")) == [1, 2, 3]


def test_user_and_project_combine_with_and() -> None:
    """User and project selections must both match."""
    assert _ids(filter_issues(ISSUES, {10}, {100}, "")) == [1]


def test_any_selected_user_matches() -> None:
    """Within one dimension any selected ID matches."""
    assert _ids(filter_issues(ISSUES, {10, 20}, set(), "")) == [1, 2]


def test_unassigned_issue_never_passes_user_filter() -> None:
    """An unassigned issue is dropped as soon as users are selected."""
    assert _ids(filter_issues(ISSUES, {10, 20}, {200}, "")) == []


def test_text_matches_id_subject_status_project_and_assignee() -> None:
    """The text filter is a case-insensitive match over several attributes."""
    assert _ids(filter_issues(ISSUES, set(), set(), "CRASH")) == [2]
    assert _ids(filter_issues(ISSUES, set(), set(), "3")) == [3]
    assert _ids(filter_issues(ISSUES, set(), set(), "docs")) == [3]
    assert _ids(filter_issues(ISSUES, set(), set(), "alice")) == [1]
    assert _ids(filter_issues(ISSUES, set(), set(), "new")) == [1, 2, 3]


def test_text_applies_after_selection() -> None:
    """Text narrows the result of the user and project pass."""
    assert _ids(filter_issues(ISSUES, set(), {100}, "login")) == [1]


def test_banner_empty_without_filters() -> None:
    """No filters means no banner lines."""
    banner = build_filter_banner(
        selected_user_ids=set(),
        selected_project_ids=set(),
        text_filter="",
        users=None,
        projects=None,
    )
    assert banner == []


def test_banner_lists_sorted_names_and_unknown_ids() -> None:
    """Names come from the catalogs, sorted; unknown IDs show as #id."""
    banner = build_filter_banner(
        selected_user_ids={20, 10, 99},
        selected_project_ids={100},
        text_filter="crash",
        users=[make_user(10, "Alice"), make_user(20, "Bob")],
        projects=[Project(id=100, name="Web")],
    )
    assert banner == [
        ("Users", "#99, Alice, Bob"),
        ("Projects", "Web"),
        ("Filter", "crash"),
    ]
