"""Pure filtering logic for the issue list."""

from collections.abc import Sequence, Set

from redmine_tui.gateway.redmine.types import Issue, Project, User


def filter_issues(
    issues: Sequence[Issue],
    selected_user_ids: Set[int],
    selected_project_ids: Set[int],
    text_filter: str,
) -> list[Issue]:
    """Filter issues by user and project selection, then by free text.

    The user and project dimensions are combined with AND; within a
    dimension any selected ID matches. An empty selection imposes no
    constraint on its dimension. Unassigned issues never pass an active
    user dimension.

    The text pass is a case-insensitive substring match against:
    - Issue ID (as decimal string)
    - Subject
    - Status name
    - Project name
    - Assignee name (if assigned)

    Args:
        issues: Issues in server order
        selected_user_ids: Assignee IDs to keep, empty for any
        selected_project_ids: Project IDs to keep, empty for any
        text_filter: Search query string

    Returns:
        Matching issues in their original relative order.
        Returns all issues if no filter is active.
    """
    if not selected_user_ids and not selected_project_ids and not text_filter:
        return list(issues)

    query_lower = text_filter.lower()
    result: list[Issue] = []

    for issue in issues:
        if selected_user_ids:
            if issue.assigned_to is None or issue.assigned_to.id not in selected_user_ids:
                continue
        if selected_project_ids and issue.project.id not in selected_project_ids:
            continue
        if query_lower and not _matches_text(issue, query_lower):
            continue
        result.append(issue)

    return result


def _matches_text(issue: Issue, query_lower: str) -> bool:
    if query_lower in str(issue.id):
        return True
    if query_lower in issue.subject.lower():
        return True
    if query_lower in issue.status.name.lower():
        return True
    if query_lower in issue.project.name.lower():
        return True
    # Unassigned issues have no name to match
    if issue.assigned_to is not None and query_lower in issue.assigned_to.name.lower():
        return True
    return False


def build_filter_banner(
    *,
    selected_user_ids: Set[int],
    selected_project_ids: Set[int],
    text_filter: str,
    users: Sequence[User] | None,
    projects: Sequence[Project] | None,
) -> list[tuple[str, str]]:
    """Describe the active filters for the banner above the issue list.

    Names are resolved from the cached catalogs; an ID missing from its
    catalog is shown as "#<id>".

    Args:
        selected_user_ids: Active user selection
        selected_project_ids: Active project selection
        text_filter: Active free-text filter
        users: Cached user catalog, None if never fetched
        projects: Cached project catalog, None if never fetched

    Returns:
        (label, value) pairs in display order, empty when no filter is active
    """
    lines: list[tuple[str, str]] = []

    if selected_user_ids:
        names = {user.id: user.display_name for user in users or ()}
        lines.append(("Users", _join_names(selected_user_ids, names)))

    if selected_project_ids:
        names = {project.id: project.name for project in projects or ()}
        lines.append(("Projects", _join_names(selected_project_ids, names)))

    if text_filter:
        lines.append(("Filter", text_filter))

    return lines


def _join_names(ids: Set[int], names: dict[int, str]) -> str:
    return ", ".join(sorted(names.get(entity_id, f"#{entity_id}") for entity_id in ids))
