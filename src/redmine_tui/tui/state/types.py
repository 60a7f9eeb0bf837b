"""Session state for the issue browser."""

from __future__ import annotations

from dataclasses import dataclass

from redmine_tui.gateway.redmine.types import Issue, Priority, Project, Status, User
from redmine_tui.tui.editing.fields import OptionCatalog
from redmine_tui.tui.editing.session import EditSession
from redmine_tui.tui.filtering.logic import filter_issues
from redmine_tui.tui.selection.logic import build_selection_list, derive_items
from redmine_tui.tui.selection.types import Candidate, SelectionList
from redmine_tui.tui.views.types import IssueScope, ViewMode

ISSUE_PAGE_LIMIT = 100


@dataclass(frozen=True)
class IssueQuery:
    """Parameters of the server-side issue list request.

    Attributes:
        project_id: Restrict to one project, None for all
        assigned_to: "me", a user ID, or None for anyone
        status_open_only: Only request issues with an open status
    """

    project_id: int | None
    assigned_to: str | None
    status_open_only: bool


@dataclass(frozen=True)
class PickerState:
    """Open user or project picker.

    Attributes:
        mode: ViewMode.USER_PICKER or ViewMode.PROJECT_PICKER
        candidates: Source snapshot, None while the catalog is loading
        working_ids: IDs toggled on in this picker, applied on confirm
        filter_text: Typed picker filter
        cursor: Cursor position in the ordered list, -1 when it is empty
    """

    mode: ViewMode
    candidates: tuple[Candidate, ...] | None
    working_ids: frozenset[int]
    filter_text: str
    cursor: int

    @property
    def loading(self) -> bool:
        return self.candidates is None

    def selection_list(self) -> SelectionList:
        """Build the ordered picker view for rendering and cursor moves."""
        items = derive_items(self.candidates or (), self.working_ids)
        return build_selection_list(items, self.filter_text, self.cursor)


@dataclass(frozen=True)
class SessionState:
    """Complete state of one browsing session.

    Replaced, never mutated, by the state machine on every event.

    Attributes:
        issues: Last fetched issues in server order
        selected_index: Index into the filtered view
        text_filter: Confirmed free-text filter
        selected_user_ids: Assignee filter, empty for no constraint
        selected_project_ids: Project filter, empty for no constraint
        mode: Active input mode
        scope: Whether the server is asked for my issues or all issues
        loading: True while the issue list is being fetched
        error: Transport failure shown in the list pane
        notice: Informational message shown in the footer
        users: Cached user catalog, None until fetched
        projects: Cached project catalog, None until fetched
        statuses: Cached status catalog, None until fetched
        priorities: Cached priority catalog, None until fetched
        current_user: Owner of the API key, None until fetched
        filter_buffer: Text typed in TEXT_FILTER_INPUT mode
        picker: Open picker, None outside the picker modes
        edit: Open edit session, None outside EDIT_SESSION mode
        detail: Selected issue with journals, None until fetched
        page_size: Issues per page for PageUp and PageDown
        issues_generation: Tag of the latest issue list request
        detail_generation: Tag of the latest detail request
        save_generation: Tag of the latest issue update request
        last_issue_query: Query of the latest issue list request
    """

    issues: tuple[Issue, ...] = ()
    selected_index: int = 0
    text_filter: str = ""
    selected_user_ids: frozenset[int] = frozenset()
    selected_project_ids: frozenset[int] = frozenset()
    mode: ViewMode = ViewMode.BROWSE
    scope: IssueScope = IssueScope.MINE
    loading: bool = False
    error: str | None = None
    notice: str | None = None
    users: tuple[User, ...] | None = None
    projects: tuple[Project, ...] | None = None
    statuses: tuple[Status, ...] | None = None
    priorities: tuple[Priority, ...] | None = None
    current_user: User | None = None
    filter_buffer: str = ""
    picker: PickerState | None = None
    edit: EditSession | None = None
    detail: Issue | None = None
    page_size: int = 10
    issues_generation: int = 0
    detail_generation: int = 0
    save_generation: int = 0
    last_issue_query: IssueQuery | None = None

    @classmethod
    def initial(cls, scope: IssueScope) -> SessionState:
        return cls(scope=scope, loading=True)

    @property
    def active_text_filter(self) -> str:
        """Text filter in effect, including the live buffer while typing."""
        if self.mode == ViewMode.TEXT_FILTER_INPUT:
            return self.filter_buffer
        return self.text_filter

    def filtered_issues(self) -> list[Issue]:
        return filter_issues(
            self.issues,
            self.selected_user_ids,
            self.selected_project_ids,
            self.active_text_filter,
        )

    def clamped_index(self, total: int) -> int:
        """Selected index clamped into [0, total - 1], 0 for an empty view."""
        if total <= 0:
            return 0
        return min(max(self.selected_index, 0), total - 1)

    def selected_issue(self) -> Issue | None:
        """The selected issue of the filtered view, None when it is empty."""
        filtered = self.filtered_issues()
        if not filtered:
            return None
        return filtered[self.clamped_index(len(filtered))]

    def option_catalog(self) -> OptionCatalog:
        return OptionCatalog(
            statuses=self.statuses or (),
            priorities=self.priorities or (),
            users=self.users or (),
        )

    def issue_query(self) -> IssueQuery:
        """Server query implied by the scope and the user selection.

        MINE scope asks the server for the key owner's issues only while no
        user is selected; any user selection needs all issues, since the
        selected users are matched on the client.
        """
        assigned_to = None
        if self.scope == IssueScope.MINE and not self.selected_user_ids:
            assigned_to = "me"
        return IssueQuery(project_id=None, assigned_to=assigned_to, status_open_only=True)
