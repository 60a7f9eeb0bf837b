"""Issue list pane for the browser."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from redmine_tui.gateway.redmine.types import Issue
from redmine_tui.tui.filtering.logic import build_filter_banner
from redmine_tui.tui.state.types import SessionState
from redmine_tui.tui.views.types import get_scope_config
from redmine_tui.tui.windowing.logic import banner_line_count, compute_window, issues_per_pane

LOADING_MESSAGE = "Loading issues..."
EMPTY_MESSAGE = "No issues found."
NO_MATCH_MESSAGE = "No matching issues found."


def list_title(state: SessionState) -> str:
    """Pane title: the scope name, with the match count while a filter is active."""
    title = get_scope_config(state.scope).display_name
    if state.active_text_filter or state.selected_user_ids or state.selected_project_ids:
        filtered = state.filtered_issues()
        return f"{title} ({len(filtered)}/{len(state.issues)})"
    return title


def render_issue_list(state: SessionState, *, pane_height: int, width: int) -> Text:
    """Render the windowed issue list with the filter banner.

    Args:
        state: Current session state
        pane_height: Content lines available in the pane
        width: Content columns available in the pane, for the separator

    Returns:
        Styled text for the pane
    """
    text = Text()

    if state.loading and not state.issues:
        text.append(LOADING_MESSAGE, style="dim")
        return text

    if state.error is not None:
        text.append(f"Error: {state.error}", style="bold red")
        text.append("\n")
        text.append("Press r to retry.", style="dim")
        text.append("\n\n")

    filtered = state.filtered_issues()
    if not filtered:
        if state.active_text_filter:
            text.append(NO_MATCH_MESSAGE, style="dim")
        else:
            text.append(EMPTY_MESSAGE, style="dim")
        return text

    banner = build_filter_banner(
        selected_user_ids=state.selected_user_ids,
        selected_project_ids=state.selected_project_ids,
        text_filter=state.active_text_filter,
        users=state.users,
        projects=state.projects,
    )
    for label, value in banner:
        text.append(f"{label}: ", style="bold #61AFEF")
        text.append(value, style="#E5C07B")
        text.append("\n")
    if banner:
        text.append("─" * max(width, 1), style="#666666")
        text.append("\n\n")

    error_lines = 3 if state.error is not None else 0
    window_size = issues_per_pane(pane_height, banner_line_count(len(banner)) + error_lines)
    selected_index = state.clamped_index(len(filtered))
    window = compute_window(len(filtered), selected_index, window_size)

    for position in range(window.start, window.end):
        if position > window.start:
            text.append("\n")
        _append_issue(text, filtered[position], selected=position == selected_index)

    return text


def _append_issue(text: Text, issue: Issue, *, selected: bool) -> None:
    marker = "▶ " if selected else "  "
    title_style = "bold reverse" if selected else "bold"
    text.append(marker, style="bold magenta")
    text.append(f"#{issue.id} ", style="bold cyan")
    text.append(issue.subject, style=title_style)
    text.append("\n")
    text.append("  ")
    text.append(issue.status.name, style="green")
    text.append(" • ", style="dim")
    text.append(issue.project.name, style="yellow")
    text.append("\n")
    text.append("  ")
    if issue.assigned_to is None:
        text.append("Unassigned", style="dim italic")
    else:
        text.append(issue.assigned_to.name, style="blue")
    text.append("\n")


class IssueListPane(Static):
    """Windowed list of the filtered issues.

    Re-renders from the session state after every transition; the selected
    issue stays centered as described by compute_window.
    """

    DEFAULT_CSS = """
    IssueListPane {
        width: 1fr;
        height: 1fr;
        border: round $primary;
        padding: 0 1;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="issue-list")
        self._state: SessionState | None = None

    def show(self, state: SessionState) -> None:
        """Render the given state.

        Args:
            state: Session state to display
        """
        self._state = state
        self.border_title = list_title(state)
        self._refresh_display()

    def on_resize(self) -> None:
        self._refresh_display()

    def visible_issue_capacity(self) -> int:
        """Window size for the current pane height, ignoring the banner."""
        return issues_per_pane(self.content_size.height, 0)

    def _refresh_display(self) -> None:
        if self._state is None:
            return
        self.update(
            render_issue_list(
                self._state,
                pane_height=self.content_size.height,
                width=self.content_size.width,
            )
        )
