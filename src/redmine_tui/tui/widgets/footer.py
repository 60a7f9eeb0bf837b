"""Footer bar: mode prompt, key hints and messages."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from redmine_tui.tui.editing.session import has_unsaved_changes
from redmine_tui.tui.state.types import SessionState
from redmine_tui.tui.views.types import ViewMode, get_scope_config

BROWSE_HINTS: tuple[tuple[str, str], ...] = (
    ("f", "Filter"),
    ("u", "Users"),
    ("p", "Projects"),
    ("m", "My/All"),
    ("e", "Edit"),
    ("r", "Refresh"),
    ("?", "Help"),
    ("q", "Quit"),
)

EDIT_HINTS: tuple[tuple[str, str], ...] = (
    ("Tab", "Next"),
    ("S-Tab", "Prev"),
    ("↑/↓", "Options"),
    ("C-s", "Save"),
    ("Esc", "Cancel"),
)


def _append_hints(text: Text, hints: tuple[tuple[str, str], ...]) -> None:
    for i, (key, label) in enumerate(hints):
        if i > 0:
            text.append("  ")
        text.append(key, style="bold")
        text.append(f": {label}", style="dim")


def render_footer(state: SessionState) -> Text:
    """Render the footer line for the active mode."""
    text = Text()

    if state.mode == ViewMode.TEXT_FILTER_INPUT:
        text.append("Filter: ", style="bold #61AFEF")
        text.append(state.filter_buffer)
        text.append("█", style="blink")
        text.append("  Enter: apply  Esc: cancel", style="dim")
        return text

    if state.mode in (ViewMode.USER_PICKER, ViewMode.PROJECT_PICKER):
        noun = "Users" if state.mode == ViewMode.USER_PICKER else "Projects"
        color = "#61AFEF" if state.mode == ViewMode.USER_PICKER else "#98C379"
        text.append(f"Filter {noun}: ", style=f"bold {color}")
        if state.picker is not None:
            text.append(state.picker.filter_text)
        text.append("█", style="blink")
        return text

    if state.mode == ViewMode.EDIT_SESSION and state.edit is not None:
        if has_unsaved_changes(state.edit):
            text.append("[UNSAVED] ", style="bold yellow")
        _append_hints(text, EDIT_HINTS)
        return text

    text.append(f"[{get_scope_config(state.scope).display_name}] ", style="bold magenta")
    _append_hints(text, BROWSE_HINTS)
    if state.notice is not None:
        text.append(f"  {state.notice}", style="green")
    return text


class FooterBar(Static):
    """Single-line footer docked at the bottom of the screen."""

    DEFAULT_CSS = """
    FooterBar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="footer-bar")

    def show(self, state: SessionState) -> None:
        self.update(render_footer(state))
