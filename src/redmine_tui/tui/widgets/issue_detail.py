"""Detail pane: the selected issue, or the edit form while editing."""

from __future__ import annotations

from datetime import datetime

from rich.text import Text
from textual.widgets import Static

from redmine_tui.gateway.redmine.types import Issue, Journal
from redmine_tui.tui.editing.fields import MultilineField, OptionCatalog, SelectField
from redmine_tui.tui.editing.session import (
    EditSession,
    display_value,
    has_unsaved_changes,
    is_field_dirty,
)
from redmine_tui.tui.state.types import SessionState

CURSOR = "▏"


def _format_timestamp(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M")


def detail_title(state: SessionState) -> str:
    if state.edit is not None:
        return f"Editing #{state.edit.issue_id}"
    issue = state.selected_issue()
    if issue is None:
        return "Details"
    return f"#{issue.id}"


def render_detail(state: SessionState) -> Text:
    """Render the detail pane content for the current state.

    Shows the edit form while an edit session is open; otherwise the
    selected issue, preferring the fetched detail (which carries the
    history) over the list entry.
    """
    if state.edit is not None:
        return render_edit_form(state.edit, state.option_catalog())

    if state.loading and not state.issues:
        return Text("Loading...", style="dim")

    issue = state.selected_issue()
    if issue is None:
        return Text("No issue selected.", style="dim")
    if state.detail is not None and state.detail.id == issue.id:
        issue = state.detail
    return render_issue(issue)


def render_issue(issue: Issue) -> Text:
    text = Text()
    text.append(issue.subject, style="bold")
    text.append("\n\n")

    rows = [
        ("Project", issue.project.name),
        ("Tracker", issue.tracker.name),
        ("Status", issue.status.name),
        ("Priority", issue.priority.name),
        ("Assigned To", issue.assigned_to.name if issue.assigned_to else "Unassigned"),
        ("Author", issue.author.name),
        ("Progress", f"{issue.done_ratio}%"),
        ("Start Date", issue.start_date or "-"),
        ("Due Date", issue.due_date or "-"),
        ("Created", _format_timestamp(issue.created_on)),
        ("Updated", _format_timestamp(issue.updated_on)),
    ]
    for label, value in rows:
        text.append(f"{label + ':':<13}", style="bold #61AFEF")
        text.append(value)
        text.append("\n")

    text.append("\nDescription\n", style="bold underline")
    if issue.description:
        text.append(issue.description)
    else:
        text.append("No description.", style="dim")
    text.append("\n")

    if issue.journals:
        text.append("\nHistory\n", style="bold underline")
        for journal in issue.journals:
            _append_journal(text, journal)

    return text


def _append_journal(text: Text, journal: Journal) -> None:
    text.append(f"{journal.user.name}", style="bold blue")
    text.append(f"  {_format_timestamp(journal.created_on)}\n", style="dim")
    for detail in journal.details:
        old_value = detail.old_value or "(none)"
        new_value = detail.new_value or "(none)"
        text.append(f"  • {detail.name}: {old_value} → {new_value}\n", style="italic")
    if journal.notes:
        text.append(f"  {journal.notes}\n")
    text.append("\n")


def render_edit_form(session: EditSession, catalog: OptionCatalog) -> Text:
    """Render every editable field with dirty markers and the focused editor.

    Args:
        session: Open edit session
        catalog: Option source, used to show the option count of select fields

    Returns:
        Styled text for the detail pane
    """
    text = Text()
    for index, field in enumerate(session.fields):
        active = index == session.active_field_index
        dirty = is_field_dirty(session, field.name)
        marker = "*" if dirty else " "
        label_style = "bold reverse" if active else "bold #61AFEF"
        text.append(f"{marker} ", style="bold yellow")
        text.append(f"{field.label}:", style=label_style)

        value = display_value(session, field.name)
        value_style = "yellow" if dirty else ""
        if isinstance(field, MultilineField):
            text.append("\n")
            text.append(value, style=value_style)
        else:
            text.append(" ")
            text.append(value, style=value_style)
        if active:
            text.append(CURSOR, style="blink")
            if isinstance(field, SelectField):
                count = len(field.options(catalog))
                hint = f"  (↑/↓ to choose, {count} options)" if count else "  (loading options...)"
                text.append(hint, style="dim")
        text.append("\n")

    text.append("\n")
    pending = len(session.pending_edits)
    if pending:
        noun = "change" if pending == 1 else "changes"
        text.append(f"{pending} pending {noun}: ", style="bold yellow")
        text.append(", ".join(sorted(session.pending_edits)), style="yellow")
        text.append("\n")
    elif has_unsaved_changes(session):
        text.append("Unsaved edit in current field\n", style="yellow")

    if session.saving:
        text.append("Saving...\n", style="bold cyan")
    if session.error is not None:
        text.append(f"Save failed: {session.error}\n", style="bold red")
        text.append("Press Ctrl+S to retry or Esc to discard.\n", style="dim")
    return text


class IssueDetailPane(Static):
    """Read-only view of the selected issue or the edit form."""

    DEFAULT_CSS = """
    IssueDetailPane {
        width: 2fr;
        height: 1fr;
        border: round $secondary;
        padding: 0 1;
        overflow-y: auto;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="issue-detail")

    def show(self, state: SessionState) -> None:
        """Render the given state.

        Args:
            state: Session state to display
        """
        self.border_title = detail_title(state)
        self.update(render_detail(state))
