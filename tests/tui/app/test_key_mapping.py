"""Tests for translating key presses into state machine events."""

from redmine_tui.tui.app import key_to_event
from redmine_tui.tui.state.events import (
    Cancel,
    Confirm,
    CursorDown,
    NextField,
    OpenUserPicker,
    Quit,
    SaveEdit,
    StartTextFilter,
    TextInput,
    TogglePickerItem,
)
from redmine_tui.tui.views.types import ViewMode


def test_browse_command_keys() -> None:
    """Browse mode maps its single-letter commands."""
    assert key_to_event(ViewMode.BROWSE, "j", "j") == CursorDown()
    assert key_to_event(ViewMode.BROWSE, "slash", "/") == StartTextFilter()
    assert key_to_event(ViewMode.BROWSE, "u", "u") == OpenUserPicker()
    assert key_to_event(ViewMode.BROWSE, "q", "q") == Quit()


def test_browse_ignores_other_characters() -> None:
    """Unbound printable keys do nothing while browsing."""
    assert key_to_event(ViewMode.BROWSE, "x", "x") is None


def test_text_modes_turn_letters_into_input() -> None:
    """Letters that are browse commands are plain text in text modes."""
    assert key_to_event(ViewMode.TEXT_FILTER_INPUT, "q", "q") == TextInput(text="q")
    assert key_to_event(ViewMode.USER_PICKER, "j", "j") == TextInput(text="j")
    assert key_to_event(ViewMode.EDIT_SESSION, "e", "e") == TextInput(text="e")


def test_picker_keys() -> None:
    """Space toggles and escape cancels in a picker."""
    assert key_to_event(ViewMode.PROJECT_PICKER, "space", " ") == TogglePickerItem()
    assert key_to_event(ViewMode.PROJECT_PICKER, "escape", None) == Cancel()


def test_space_joins_typed_picker_filter() -> None:
    """Once a picker filter is typed, space is part of it."""
    assert key_to_event(ViewMode.USER_PICKER, "space", " ", typing_filter=True) == TextInput(
        text=" "
    )
    assert key_to_event(ViewMode.USER_PICKER, "enter", "\r", typing_filter=True) == Confirm()
    assert key_to_event(ViewMode.EDIT_SESSION, "space", " ", typing_filter=True) == TextInput(
        text=" "
    )


def test_edit_keys() -> None:
    """Edit mode has field navigation and save keys."""
    assert key_to_event(ViewMode.EDIT_SESSION, "enter", "\r") == NextField()
    assert key_to_event(ViewMode.EDIT_SESSION, "ctrl+s", None) == SaveEdit()
    assert key_to_event(ViewMode.EDIT_SESSION, "f1", None) is None


def test_ctrl_c_quits_everywhere() -> None:
    """Ctrl+C quits from any mode."""
    for mode in ViewMode:
        assert key_to_event(mode, "ctrl+c", None) == Quit()
