"""Tests for the edit session diff tracker."""

from redmine_tui.gateway.redmine.fake import make_issue, make_user
from redmine_tui.gateway.redmine.types import Priority, Status
from redmine_tui.tui.editing.fields import OptionCatalog
from redmine_tui.tui.editing.session import (
    EditSession,
    build_update_payload,
    commit_active_field,
    cycle_option,
    display_value,
    has_unsaved_changes,
    is_field_dirty,
    open_session,
    set_editor_value,
    switch_field,
)

CATALOG = OptionCatalog(
    statuses=(Status(id=1, name="New"), Status(id=2, name="In Progress"), Status(id=3, name="Closed")),
    priorities=(Priority(id=2, name="Normal"), Priority(id=3, name="High")),
    users=(make_user(10, "Alice"),),
)

ISSUE = make_issue(7, "A", assignee=(10, "Alice"), done_ratio=20, due_date="2026-05-01")


def _focus(session: EditSession, name: str) -> EditSession:
    while session.active_field.name != name:
        session = switch_field(session, 1, CATALOG)
    return session


def test_open_session_snapshots_originals() -> None:
    """A new session has no edits and focuses the subject."""
    session = open_session(ISSUE)

    assert session.issue_id == 7
    assert session.pending_edits == {}
    assert session.active_field.name == "subject"
    assert session.editor_value == "A"
    assert session.original_values["done_ratio"] == "20"
    assert session.original_values["assigned_to_id"] == "Alice"
    assert not has_unsaved_changes(session)


def test_changed_value_becomes_pending_on_switch() -> None:
    """Leaving a changed field records it as pending."""
    session = set_editor_value(open_session(ISSUE), "B")

    session = switch_field(session, 1, CATALOG)

    assert session.pending_edits == {"subject": "B"}
    assert session.active_field.name == "description"
    assert display_value(session, "subject") == "B"
    assert is_field_dirty(session, "subject")


def test_reverting_a_field_clears_its_pending_edit() -> None:
    """Typing back the original value removes the pending edit."""
    session = switch_field(set_editor_value(open_session(ISSUE), "B"), 1, CATALOG)
    session = switch_field(session, -1, CATALOG)
    assert session.editor_value == "B"

    session = commit_active_field(set_editor_value(session, "A"), CATALOG)

    assert session.pending_edits == {}
    assert not has_unsaved_changes(session)
    assert build_update_payload(session, CATALOG) == {}


def test_switch_wraps_around() -> None:
    """Moving back from the first field focuses the last one."""
    session = switch_field(open_session(ISSUE), -1, CATALOG)
    assert session.active_field.name == "due_date"
    assert session.editor_value == "2026-05-01"


def test_invalid_value_is_not_pending() -> None:
    """A value that fails validation never reaches the payload."""
    session = _focus(open_session(ISSUE), "done_ratio")
    session = commit_active_field(set_editor_value(session, "150"), CATALOG)

    assert "done_ratio" not in session.pending_edits
    assert build_update_payload(session, CATALOG) == {}


def test_invalid_value_replaces_earlier_valid_edit() -> None:
    """An invalid value also drops a previously pending value for the field."""
    session = _focus(open_session(ISSUE), "done_ratio")
    session = commit_active_field(set_editor_value(session, "50"), CATALOG)
    assert session.pending_edits == {"done_ratio": "50"}

    session = commit_active_field(set_editor_value(session, "x"), CATALOG)

    assert session.pending_edits == {}


def test_live_editor_value_is_displayed() -> None:
    """The focused field shows its live text even before a commit."""
    session = set_editor_value(open_session(ISSUE), "Draft")

    assert display_value(session, "subject") == "Draft"
    assert session.pending_edits == {}
    assert has_unsaved_changes(session)
    assert is_field_dirty(session, "subject")
    assert not is_field_dirty(session, "description")


def test_cycle_option_wraps() -> None:
    """Select fields step through their options with wraparound."""
    session = _focus(open_session(ISSUE), "status_id")
    assert session.editor_value == "New"

    session = cycle_option(session, 1, CATALOG)
    assert session.editor_value == "In Progress"

    session = cycle_option(session, -1, CATALOG)
    session = cycle_option(session, -1, CATALOG)
    assert session.editor_value == "Closed"


def test_cycle_option_ignores_non_select_fields() -> None:
    """Cycling on a text field changes nothing."""
    session = open_session(ISSUE)
    assert cycle_option(session, 1, CATALOG) == session


def test_payload_contains_only_changed_fields_coerced() -> None:
    """The payload holds exactly the pending fields, typed for the server."""
    session = open_session(ISSUE)
    session = _focus(session, "status_id")
    session = cycle_option(session, 1, CATALOG)
    session = _focus(session, "assigned_to_id")
    session = set_editor_value(session, "Unassigned")
    session = _focus(session, "done_ratio")
    session = commit_active_field(set_editor_value(session, "60"), CATALOG)

    payload = build_update_payload(session, CATALOG)

    assert payload == {"status_id": 2, "assigned_to_id": None, "done_ratio": 60}


def test_full_tab_cycle_keeps_pending_edits() -> None:
    """Tabbing through every field and back leaves the pending edits as they were."""
    session = switch_field(set_editor_value(open_session(ISSUE), "B"), 1, CATALOG)
    session = _focus(session, "done_ratio")
    session = switch_field(set_editor_value(session, "60"), 1, CATALOG)
    before = dict(session.pending_edits)
    assert before == {"subject": "B", "done_ratio": "60"}

    for _ in range(len(session.fields)):
        session = switch_field(session, 1, CATALOG)
        assert session.pending_edits == before
    assert session.active_field.name == "due_date"

    for _ in range(len(session.fields)):
        session = switch_field(session, -1, CATALOG)
        assert session.pending_edits == before
    assert session.active_field.name == "due_date"


def test_leaving_unchanged_field_twice_adds_nothing() -> None:
    """Committing an untouched field is a no-op however often it happens."""
    session = switch_field(set_editor_value(open_session(ISSUE), "B"), 1, CATALOG)
    session = _focus(session, "status_id")

    once = switch_field(session, 1, CATALOG)
    back = switch_field(once, -1, CATALOG)
    twice = switch_field(back, 1, CATALOG)

    assert once.pending_edits == {"subject": "B"}
    assert twice.pending_edits == once.pending_edits
    assert commit_active_field(twice, CATALOG).pending_edits == once.pending_edits


def test_select_value_differing_only_in_case_is_unchanged() -> None:
    """Typing the current status in another case is not an edit."""
    session = _focus(open_session(ISSUE), "status_id")
    assert session.original_values["status_id"] == "New"

    session = commit_active_field(set_editor_value(session, "new"), CATALOG)

    assert session.pending_edits == {}
    assert build_update_payload(session, CATALOG) == {}


def test_select_value_for_another_option_is_pending() -> None:
    """A differently cased label of another option is still an edit."""
    session = _focus(open_session(ISSUE), "status_id")

    session = commit_active_field(set_editor_value(session, "closed"), CATALOG)

    assert session.pending_edits == {"status_id": "closed"}
    assert build_update_payload(session, CATALOG) == {"status_id": 3}
