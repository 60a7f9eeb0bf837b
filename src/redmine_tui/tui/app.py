"""Main Textual application for browsing and editing Redmine issues."""

import asyncio
import logging

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import ModalScreen
from textual.widgets import Header

from redmine_tui.tui.data.provider import RedmineDataProvider
from redmine_tui.tui.screens.help_screen import HelpScreen
from redmine_tui.tui.state.effects import Effect, QuitApp
from redmine_tui.tui.state.events import (
    Backspace,
    Cancel,
    Confirm,
    CursorDown,
    CursorEnd,
    CursorHome,
    CursorUp,
    Event,
    NextField,
    OpenProjectPicker,
    OpenUserPicker,
    PageDown,
    PageUp,
    PreviousField,
    Quit,
    Refresh,
    Resized,
    SaveEdit,
    Started,
    StartEdit,
    StartTextFilter,
    TextInput,
    TogglePickerItem,
    ToggleScope,
)
from redmine_tui.tui.state.machine import transition
from redmine_tui.tui.state.types import SessionState
from redmine_tui.tui.views.types import IssueScope, PaneColors, ViewMode
from redmine_tui.tui.widgets.footer import FooterBar
from redmine_tui.tui.widgets.issue_detail import IssueDetailPane
from redmine_tui.tui.widgets.issue_list import IssueListPane
from redmine_tui.tui.widgets.picker import PickerOverlay

logger = logging.getLogger(__name__)

_NAVIGATION_KEYS: dict[str, Event] = {
    "up": CursorUp(),
    "down": CursorDown(),
    "home": CursorHome(),
    "end": CursorEnd(),
    "pageup": PageUp(),
    "pagedown": PageDown(),
}

_BROWSE_KEYS: dict[str, Event] = {
    **_NAVIGATION_KEYS,
    "k": CursorUp(),
    "j": CursorDown(),
    "q": Quit(),
    "f": StartTextFilter(),
    "slash": StartTextFilter(),
    "u": OpenUserPicker(),
    "p": OpenProjectPicker(),
    "m": ToggleScope(),
    "e": StartEdit(),
    "r": Refresh(),
}

_TEXT_FILTER_KEYS: dict[str, Event] = {
    "enter": Confirm(),
    "escape": Cancel(),
    "backspace": Backspace(),
}

_PICKER_KEYS: dict[str, Event] = {
    **_NAVIGATION_KEYS,
    "space": TogglePickerItem(),
    "enter": Confirm(),
    "escape": Cancel(),
    "backspace": Backspace(),
}

_EDIT_KEYS: dict[str, Event] = {
    "tab": NextField(),
    "enter": NextField(),
    "shift+tab": PreviousField(),
    "up": CursorUp(),
    "down": CursorDown(),
    "ctrl+s": SaveEdit(),
    "escape": Cancel(),
    "backspace": Backspace(),
}

_PICKER_MODES = frozenset({ViewMode.USER_PICKER, ViewMode.PROJECT_PICKER})

_KEYS_BY_MODE: dict[ViewMode, dict[str, Event]] = {
    ViewMode.BROWSE: _BROWSE_KEYS,
    ViewMode.TEXT_FILTER_INPUT: _TEXT_FILTER_KEYS,
    ViewMode.USER_PICKER: _PICKER_KEYS,
    ViewMode.PROJECT_PICKER: _PICKER_KEYS,
    ViewMode.EDIT_SESSION: _EDIT_KEYS,
}


def key_to_event(
    mode: ViewMode, key: str, character: str | None, *, typing_filter: bool = False
) -> Event | None:
    """Translate a key press into a state machine event for the active mode.

    Browse mode only reacts to its command keys. The other modes turn any
    printable character that is not one of their keys into TextInput. In a
    picker, Space toggles the item under the cursor until a filter is typed;
    from then on it is part of the filter and Tab toggles.

    Args:
        mode: Active view mode
        key: Textual key name (e.g. "up", "ctrl+s", "a")
        character: Printable character of the key, None for special keys
        typing_filter: True if the open picker has a non-empty filter

    Returns:
        The event to dispatch, or None if the key does nothing in this mode
    """
    if key == "ctrl+c":
        return Quit()

    if typing_filter and key == "space" and mode in _PICKER_MODES:
        return TextInput(text=" ")

    mapped = _KEYS_BY_MODE[mode].get(key)
    if mapped is not None:
        return mapped

    if mode == ViewMode.BROWSE:
        return None
    if character is not None and len(character) == 1 and character.isprintable():
        return TextInput(text=character)
    return None


class RedmineTuiApp(App):
    """Interactive TUI for Redmine issues.

    All behavior lives in the pure state machine. The app maps keys to
    events, renders the resulting state, and runs the requested effects in
    worker tasks whose results are fed back as events.
    """

    TITLE = "redmine-tui"

    ENABLE_COMMAND_PALETTE = False

    CSS = """
    #main-container {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "quit_app", "Quit", priority=True, show=False),
        # Tab is claimed by focus navigation unless bound with priority
        Binding("tab", "next_field", "Next field", priority=True, show=False),
        Binding("shift+tab", "previous_field", "Previous field", priority=True, show=False),
    ]

    def __init__(
        self,
        provider: RedmineDataProvider,
        *,
        scope: IssueScope = IssueScope.MINE,
        colors: PaneColors | None = None,
        server_url: str = "",
    ) -> None:
        """Initialize the app.

        Args:
            provider: Executes effects against the Redmine gateway
            scope: Initial issue scope
            colors: Pane border colors, defaults if None
            server_url: Server URL shown in the header
        """
        super().__init__()
        self._provider = provider
        self._session_state = SessionState.initial(scope)
        self._colors = colors or PaneColors.default()
        self._server_url = server_url
        self._list_pane: IssueListPane | None = None
        self._detail_pane: IssueDetailPane | None = None
        self._picker: PickerOverlay | None = None
        self._footer: FooterBar | None = None

    @property
    def session_state(self) -> SessionState:
        """Current session state (read-only, for rendering and tests)."""
        return self._session_state

    def compose(self) -> ComposeResult:
        """Create the application layout."""
        yield Header(show_clock=True)
        with Horizontal(id="main-container"):
            yield IssueListPane()
            yield IssueDetailPane()
        yield PickerOverlay()
        yield FooterBar()

    def on_mount(self) -> None:
        """Initialize widgets and start loading issues."""
        self._list_pane = self.query_one(IssueListPane)
        self._detail_pane = self.query_one(IssueDetailPane)
        self._picker = self.query_one(PickerOverlay)
        self._footer = self.query_one(FooterBar)
        self.sub_title = self._server_url
        self.apply_event(Started())
        self.call_after_refresh(self._report_page_size)

    def on_resize(self) -> None:
        self.call_after_refresh(self._report_page_size)

    def _report_page_size(self) -> None:
        if self._list_pane is None:
            return
        page_size = self._list_pane.visible_issue_capacity()
        if page_size != self._session_state.page_size:
            self.apply_event(Resized(page_size=page_size))

    def on_key(self, event: events.Key) -> None:
        """Route key presses to the state machine."""
        # Keys belong to the modal while one is open
        if isinstance(self.screen, ModalScreen):
            return

        if self._session_state.mode == ViewMode.BROWSE and event.key == "question_mark":
            event.stop()
            self.push_screen(HelpScreen())
            return

        picker = self._session_state.picker
        mapped = key_to_event(
            self._session_state.mode,
            event.key,
            event.character,
            typing_filter=picker is not None and bool(picker.filter_text),
        )
        if mapped is None:
            return
        event.stop()
        event.prevent_default()
        self.apply_event(mapped)

    def apply_event(self, event: Event) -> None:
        """Apply one event, re-render, and start the requested effects.

        Args:
            event: Operator action or transport result
        """
        self._session_state, effects = transition(self._session_state, event)
        self._render_state()
        for effect in effects:
            if isinstance(effect, QuitApp):
                self.exit()
                return
            self.run_worker(self._run_effect(effect), group="effects")

    async def _run_effect(self, effect: Effect) -> None:
        """Run a blocking gateway call in the executor and feed back the result."""
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, self._provider.execute, effect)
        if result is not None:
            self.apply_event(result)

    def _render_state(self) -> None:
        state = self._session_state
        if self._list_pane is not None:
            self._list_pane.show(state)
        if self._detail_pane is not None:
            self._detail_pane.show(state)
        if self._picker is not None:
            self._picker.show(state.picker)
        if self._footer is not None:
            self._footer.show(state)
        self._apply_border_colors()
        if state.current_user is not None:
            self.sub_title = f"{self._server_url}  {state.current_user.display_name}".strip()

    def _apply_border_colors(self) -> None:
        if self._list_pane is None or self._detail_pane is None:
            return
        editing = self._session_state.mode == ViewMode.EDIT_SESSION
        active, inactive = self._colors.active_pane_border, self._colors.inactive_pane_border
        self._list_pane.styles.border = ("round", inactive if editing else active)
        self._detail_pane.styles.border = ("round", active if editing else inactive)

    def action_quit_app(self) -> None:
        """Quit the application from any mode."""
        self.apply_event(Quit())

    def action_next_field(self) -> None:
        """Advance to the next field while editing, or toggle the picker item."""
        if isinstance(self.screen, ModalScreen):
            return
        if self._session_state.mode in _PICKER_MODES:
            self.apply_event(TogglePickerItem())
        elif self._session_state.mode == ViewMode.EDIT_SESSION:
            self.apply_event(NextField())

    def action_previous_field(self) -> None:
        """Move to the previous field while editing."""
        if self._editing_without_modal():
            self.apply_event(PreviousField())

    def _editing_without_modal(self) -> bool:
        if isinstance(self.screen, ModalScreen):
            return False
        return self._session_state.mode == ViewMode.EDIT_SESSION
