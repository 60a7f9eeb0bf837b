"""Overlay listing the candidates of an open user or project picker."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from redmine_tui.tui.state.types import PickerState
from redmine_tui.tui.views.types import ViewMode
from redmine_tui.tui.windowing.logic import picker_window

MAX_VISIBLE_ITEMS = 10


def picker_title(picker: PickerState) -> str:
    if picker.mode == ViewMode.USER_PICKER:
        return "Select Users"
    return "Select Projects"


def render_picker(picker: PickerState, *, max_visible: int = MAX_VISIBLE_ITEMS) -> Text:
    """Render the picker list with checkmarks and the cursor.

    Args:
        picker: Open picker
        max_visible: Rows shown before the list scrolls

    Returns:
        Styled text for the overlay
    """
    text = Text()
    text.append(
        "Space or Tab: toggle (Tab once filtering)  Enter: apply  Esc: cancel\n", style="dim"
    )

    if picker.loading:
        noun = "users" if picker.mode == ViewMode.USER_PICKER else "projects"
        text.append(f"\nLoading {noun}...", style="dim")
        return text

    listing = picker.selection_list()
    if not listing.items:
        if picker.filter_text:
            text.append("\nNo matching items", style="dim")
        else:
            text.append("\nNo items available", style="dim")
        return text

    text.append("\n")
    window = picker_window(len(listing.items), listing.cursor, max_visible)
    for position in range(window.start, window.end):
        item = listing.items[position]
        at_cursor = position == listing.cursor
        text.append("→ " if at_cursor else "  ", style="bold magenta")
        text.append("[✓] " if item.selected else "[ ] ", style="green" if item.selected else "dim")
        text.append(item.display_text, style="bold" if at_cursor else "")
        text.append("\n")

    if len(window) < len(listing.items):
        text.append(f"\nShowing {window.start + 1}-{window.end} of {len(listing.items)}", style="dim")
    return text


class PickerOverlay(Static):
    """Multi-select overlay docked at the bottom of the screen.

    Hidden unless a picker is open.
    """

    DEFAULT_CSS = """
    PickerOverlay {
        dock: bottom;
        height: auto;
        max-height: 70%;
        margin: 0 4 2 4;
        border: round $accent;
        background: $surface;
        padding: 0 1;
        display: none;
    }

    PickerOverlay.visible {
        display: block;
    }
    """

    def __init__(self) -> None:
        super().__init__(id="picker")

    def show(self, picker: PickerState | None) -> None:
        """Render the picker, or hide the overlay when no picker is open.

        Args:
            picker: Open picker, None to hide
        """
        if picker is None:
            self.remove_class("visible")
            return
        self.border_title = picker_title(picker)
        self.update(render_picker(picker))
        self.add_class("visible")
