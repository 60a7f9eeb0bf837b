"""Edit session: per-field diff tracking for one issue.

An edit session snapshots the editable fields of an issue when it opens and
records a pending edit only for fields whose value differs from that
snapshot. Every function here is pure and returns a new EditSession.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from redmine_tui.gateway.redmine.types import Issue
from redmine_tui.tui.editing.fields import (
    EDITABLE_FIELDS,
    EditableField,
    OptionCatalog,
    SelectField,
    coerce_value,
    find_option,
    is_valid,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditSession:
    """In-progress multi-field edit of one issue.

    Attributes:
        issue_id: The issue being edited
        fields: Editable fields in Tab order
        original_values: Field name to value read when the session opened
        pending_edits: Field name to changed value; never holds a value equal
            to its original
        active_field_index: Index into fields of the focused editor
        editor_value: Live text of the focused editor
        saving: True while an update request is in flight
        error: Message of the last failed save, None otherwise
    """

    issue_id: int
    fields: tuple[EditableField, ...]
    original_values: dict[str, str]
    pending_edits: dict[str, str]
    active_field_index: int
    editor_value: str
    saving: bool
    error: str | None

    @property
    def active_field(self) -> EditableField:
        return self.fields[self.active_field_index]


def open_session(issue: Issue, fields: Sequence[EditableField] = EDITABLE_FIELDS) -> EditSession:
    """Open an edit session on an issue.

    Args:
        issue: The issue to edit
        fields: Editable fields in Tab order, must be non-empty

    Returns:
        Session with no pending edits and the first field focused
    """
    field_tuple = tuple(fields)
    originals = {field.name: field.read(issue) for field in field_tuple}
    return EditSession(
        issue_id=issue.id,
        fields=field_tuple,
        original_values=originals,
        pending_edits={},
        active_field_index=0,
        editor_value=originals[field_tuple[0].name],
        saving=False,
        error=None,
    )


def commit_active_field(session: EditSession, catalog: OptionCatalog) -> EditSession:
    """Diff the focused editor against its original value.

    A different and valid value becomes a pending edit. A value equal to the
    original, or one that fails validation, is removed from pending edits.
    Select values are compared by the option they resolve to, so "new" and
    "New" are the same status.

    Args:
        session: Current session
        catalog: Option source for select field validation

    Returns:
        Session with pending edits updated for the focused field
    """
    field = session.active_field
    value = session.editor_value
    pending = dict(session.pending_edits)

    if _is_unchanged(field, value, session.original_values[field.name], catalog):
        pending.pop(field.name, None)
    elif is_valid(field, value, catalog):
        pending[field.name] = value
    else:
        logger.debug("Dropping invalid value for %s: %r", field.name, value)
        pending.pop(field.name, None)

    return replace(session, pending_edits=pending)


def _is_unchanged(
    field: EditableField, value: str, original: str, catalog: OptionCatalog
) -> bool:
    if value == original:
        return True
    if not isinstance(field, SelectField):
        return False
    chosen = find_option(field, value, catalog)
    before = find_option(field, original, catalog)
    return chosen is not None and before is not None and chosen.value == before.value


def switch_field(session: EditSession, step: int, catalog: OptionCatalog) -> EditSession:
    """Commit the focused field and move focus with wraparound.

    Args:
        session: Current session
        step: +1 for the next field, -1 for the previous one
        catalog: Option source for select field validation

    Returns:
        Session focused on the new field, its editor primed with the pending
        value if any, else the original value
    """
    committed = commit_active_field(session, catalog)
    index = (committed.active_field_index + step) % len(committed.fields)
    name = committed.fields[index].name
    return replace(
        committed,
        active_field_index=index,
        editor_value=committed.pending_edits.get(name, committed.original_values[name]),
    )


def set_editor_value(session: EditSession, value: str) -> EditSession:
    return replace(session, editor_value=value)


def cycle_option(session: EditSession, step: int, catalog: OptionCatalog) -> EditSession:
    """Step the focused select field through its options with wraparound.

    Has no effect on non-select fields or when the field has no options.
    When the editor text matches no option, stepping forward starts at the
    first option and stepping back at the last.
    """
    field = session.active_field
    if not isinstance(field, SelectField):
        return session
    options = field.options(catalog)
    if not options:
        return session

    current = find_option(field, session.editor_value, catalog)
    if current is None:
        index = 0 if step > 0 else len(options) - 1
    else:
        index = (options.index(current) + step) % len(options)
    return replace(session, editor_value=options[index].label)


def has_unsaved_changes(session: EditSession) -> bool:
    """True if any edit is pending or the focused editor differs from its original."""
    if session.pending_edits:
        return True
    return session.editor_value != session.original_values[session.active_field.name]


def is_field_dirty(session: EditSession, name: str) -> bool:
    if name in session.pending_edits:
        return True
    return name == session.active_field.name and (
        session.editor_value != session.original_values[name]
    )


def display_value(session: EditSession, name: str) -> str:
    """Value to show for a field: live editor text, else pending, else original."""
    if name == session.active_field.name:
        return session.editor_value
    if name in session.pending_edits:
        return session.pending_edits[name]
    return session.original_values[name]


def build_update_payload(session: EditSession, catalog: OptionCatalog) -> dict[str, Any]:
    """Build the update request body from pending edits.

    Call after commit_active_field so the focused editor is included.

    Args:
        session: Session with committed pending edits
        catalog: Option source to resolve select labels to IDs

    Returns:
        Mapping with exactly the pending field names, each coerced to the
        type Redmine expects
    """
    fields_by_name = {field.name: field for field in session.fields}
    return {
        name: coerce_value(fields_by_name[name], value, catalog)
        for name, value in session.pending_edits.items()
    }
