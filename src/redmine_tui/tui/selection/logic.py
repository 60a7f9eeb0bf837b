"""Pure logic for building the user and project picker lists."""

from collections.abc import Sequence, Set

from redmine_tui.gateway.redmine.types import Project, User
from redmine_tui.tui.selection.types import Candidate, SelectableItem, SelectionList


def build_selection_list(
    items: Sequence[SelectableItem],
    filter_text: str,
    cursor: int,
) -> SelectionList:
    """Partition, filter and sort picker items.

    Selected items are never hidden by the filter so that they can always
    be deselected. Unselected items are kept only if their display text
    contains filter_text (case-insensitive). Each partition is sorted by
    display text using plain string ordering (case-sensitive), and the
    selected partition comes first.

    Args:
        items: Source collection with derived selected flags
        filter_text: Picker filter text, empty for no filter
        cursor: Requested cursor position

    Returns:
        SelectionList with the ordered items, the cursor clamped into
        range (-1 when the list is empty) and the map back to source indices
    """
    filter_lower = filter_text.lower()
    selected: list[tuple[int, SelectableItem]] = []
    unselected: list[tuple[int, SelectableItem]] = []

    for index, item in enumerate(items):
        if item.selected:
            selected.append((index, item))
            continue
        if filter_lower and filter_lower not in item.display_text.lower():
            continue
        unselected.append((index, item))

    selected.sort(key=lambda pair: pair[1].display_text)
    unselected.sort(key=lambda pair: pair[1].display_text)
    ordered = selected + unselected

    if not ordered:
        clamped = -1
    else:
        clamped = min(max(cursor, 0), len(ordered) - 1)

    return SelectionList(
        items=tuple(item for _, item in ordered),
        cursor=clamped,
        source_indices=tuple(index for index, _ in ordered),
    )


def derive_items(candidates: Sequence[Candidate], selected_ids: Set[int]) -> list[SelectableItem]:
    """Attach selected flags from the working set to a candidate snapshot."""
    return [
        SelectableItem(
            id=candidate.id,
            display_text=candidate.display_text,
            selected=candidate.id in selected_ids,
        )
        for candidate in candidates
    ]


def user_candidates(users: Sequence[User]) -> tuple[Candidate, ...]:
    """Build picker candidates for users.

    The login is appended in parentheses when it differs from the display
    name, so users with the same name can be told apart.
    """
    candidates: list[Candidate] = []
    for user in users:
        text = user.display_name
        if user.login and user.login != text:
            text = f"{text} ({user.login})"
        candidates.append(Candidate(id=user.id, display_text=text))
    return tuple(candidates)


def project_candidates(projects: Sequence[Project]) -> tuple[Candidate, ...]:
    return tuple(Candidate(id=project.id, display_text=project.name) for project in projects)
