"""Editable issue fields and their per-kind validation and coercion."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from redmine_tui.gateway.redmine.types import Issue, Priority, Status, User

UNASSIGNED_LABEL = "Unassigned"

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class OptionCatalog:
    """Cached catalogs that select fields draw their options from.

    Attributes:
        statuses: Issue statuses, empty if not fetched yet
        priorities: Issue priorities, empty if not fetched yet
        users: Assignable users, empty if not fetched yet
    """

    statuses: tuple[Status, ...]
    priorities: tuple[Priority, ...]
    users: tuple[User, ...]

    @classmethod
    def empty(cls) -> OptionCatalog:
        return cls(statuses=(), priorities=(), users=())


@dataclass(frozen=True)
class SelectOption:
    """One choice of a select field.

    Attributes:
        label: Text shown in the editor
        value: ID sent to the server, None to clear the attribute
    """

    label: str
    value: int | None


@dataclass(frozen=True)
class TextField:
    """Single-line text field. A required field rejects empty input."""

    name: str
    label: str
    read: Callable[[Issue], str]
    required: bool


@dataclass(frozen=True)
class MultilineField:
    name: str
    label: str
    read: Callable[[Issue], str]


@dataclass(frozen=True)
class NumberField:
    """Integer field constrained to [minimum, maximum]."""

    name: str
    label: str
    read: Callable[[Issue], str]
    minimum: int
    maximum: int


@dataclass(frozen=True)
class DateField:
    """Date field in YYYY-MM-DD form. Empty input clears the date."""

    name: str
    label: str
    read: Callable[[Issue], str]


@dataclass(frozen=True)
class SelectField:
    """Field whose value is chosen from a list of labelled IDs."""

    name: str
    label: str
    read: Callable[[Issue], str]
    options: Callable[[OptionCatalog], tuple[SelectOption, ...]]


EditableField = TextField | MultilineField | NumberField | DateField | SelectField


def _status_options(catalog: OptionCatalog) -> tuple[SelectOption, ...]:
    return tuple(SelectOption(label=s.name, value=s.id) for s in catalog.statuses)


def _priority_options(catalog: OptionCatalog) -> tuple[SelectOption, ...]:
    return tuple(SelectOption(label=p.name, value=p.id) for p in catalog.priorities)


def _assignee_options(catalog: OptionCatalog) -> tuple[SelectOption, ...]:
    options = [SelectOption(label=UNASSIGNED_LABEL, value=None)]
    options.extend(SelectOption(label=u.display_name, value=u.id) for u in catalog.users)
    return tuple(options)


def _read_assignee(issue: Issue) -> str:
    if issue.assigned_to is None:
        return UNASSIGNED_LABEL
    return issue.assigned_to.name


EDITABLE_FIELDS: tuple[EditableField, ...] = (
    TextField(name="subject", label="Subject", read=lambda i: i.subject, required=True),
    MultilineField(name="description", label="Description", read=lambda i: i.description),
    SelectField(
        name="status_id",
        label="Status",
        read=lambda i: i.status.name,
        options=_status_options,
    ),
    SelectField(
        name="priority_id",
        label="Priority",
        read=lambda i: i.priority.name,
        options=_priority_options,
    ),
    SelectField(
        name="assigned_to_id",
        label="Assigned To",
        read=_read_assignee,
        options=_assignee_options,
    ),
    NumberField(
        name="done_ratio",
        label="Progress",
        read=lambda i: str(i.done_ratio),
        minimum=0,
        maximum=100,
    ),
    DateField(name="due_date", label="Due Date", read=lambda i: i.due_date or ""),
)


def find_option(field: SelectField, value: str, catalog: OptionCatalog) -> SelectOption | None:
    """Resolve editor text to one of the field's options.

    An exact label match wins; otherwise a case-insensitive match is used.
    """
    options = field.options(catalog)
    for option in options:
        if option.label == value:
            return option
    value_lower = value.strip().lower()
    for option in options:
        if option.label.lower() == value_lower:
            return option
    return None


def is_valid(field: EditableField, value: str, catalog: OptionCatalog) -> bool:
    """Check whether editor text can be sent for this field.

    Args:
        field: The field being edited
        value: Raw editor text
        catalog: Option source for select fields

    Returns:
        True if coerce_value would succeed for this value
    """
    if isinstance(field, TextField):
        return bool(value.strip()) or not field.required
    if isinstance(field, MultilineField):
        return True
    if isinstance(field, NumberField):
        number = _parse_int(value)
        return number is not None and field.minimum <= number <= field.maximum
    if isinstance(field, DateField):
        return _is_date(value)
    return find_option(field, value, catalog) is not None


def coerce_value(field: EditableField, value: str, catalog: OptionCatalog) -> str | int | None:
    """Convert validated editor text into the value Redmine expects.

    Args:
        field: The field being edited
        value: Editor text that passed is_valid
        catalog: Option source for select fields

    Returns:
        The option ID for select fields (None for "Unassigned"), an int for
        number fields, None for an empty date, otherwise the text itself

    Raises:
        ValueError: If the value does not pass is_valid
    """
    if not is_valid(field, value, catalog):
        raise ValueError(f"Invalid value for {field.name}: {value!r}")

    if isinstance(field, NumberField):
        return int(value.strip())
    if isinstance(field, DateField):
        stripped = value.strip()
        return stripped if stripped else None
    if isinstance(field, SelectField):
        option = find_option(field, value, catalog)
        if option is None:
            raise ValueError(f"No option {value!r} for {field.name}")
        return option.value
    return value


def _parse_int(value: str) -> int | None:
    stripped = value.strip()
    if not stripped:
        return None
    try:
        return int(stripped)
    except ValueError:
        return None


def _is_date(value: str) -> bool:
    stripped = value.strip()
    if not stripped:
        return True
    if len(stripped) != 10:
        return False
    try:
        datetime.strptime(stripped, DATE_FORMAT)
    except ValueError:
        return False
    return True
