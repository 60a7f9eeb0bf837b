"""Modal help screen listing the key bindings of every mode."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Navigation",
        (
            ("↑/k", "Move selection up"),
            ("↓/j", "Move selection down"),
            ("Home/End", "Jump to first/last issue"),
            ("PgUp/PgDn", "Move one page"),
        ),
    ),
    (
        "Filtering",
        (
            ("f or /", "Filter by text"),
            ("u", "Select users"),
            ("p", "Select projects"),
            ("Space or Tab", "Toggle picker entry (Tab once a filter is typed)"),
            ("m", "Toggle my issues / all issues"),
        ),
    ),
    (
        "Editing",
        (
            ("e", "Edit selected issue"),
            ("Tab/Enter", "Next field"),
            ("Shift+Tab", "Previous field"),
            ("↑/↓", "Cycle select options"),
            ("Ctrl+S", "Save all changes"),
            ("Esc", "Discard changes"),
        ),
    ),
    (
        "General",
        (
            ("r", "Refresh issues"),
            ("?", "Show this help"),
            ("q/Ctrl+C", "Quit"),
        ),
    ),
)


class HelpScreen(ModalScreen):
    """Modal screen showing keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("q", "dismiss", "Close"),
        Binding("question_mark", "dismiss", "Close"),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-dialog {
        width: 60;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    #help-title {
        text-style: bold;
        text-align: center;
        margin-bottom: 1;
        width: 100%;
    }

    .help-section {
        height: auto;
        margin-top: 1;
    }

    .help-section-title {
        text-style: bold;
        color: $primary;
    }

    .help-binding {
        margin-left: 2;
    }
    """

    def compose(self) -> ComposeResult:
        """Create help dialog content."""
        with Vertical(id="help-dialog"):
            yield Label("redmine-tui - Keyboard Shortcuts", id="help-title")

            for title, bindings in HELP_SECTIONS:
                with Vertical(classes="help-section"):
                    yield Label(title, classes="help-section-title")
                    for key, description in bindings:
                        yield Label(f"{key:<11} {description}", classes="help-binding")

            yield Label("")
            yield Label("Press Esc, q or ? to close", id="help-footer")
