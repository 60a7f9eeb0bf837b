"""Tests for Redmine entity types."""

from redmine_tui.gateway.redmine.types import User


def _user(*, name: str = "", login: str = "", firstname: str = "", lastname: str = "") -> User:
    return User(id=12, name=name, login=login, firstname=firstname, lastname=lastname)


def test_display_name_prefers_full_name() -> None:
    """The name field wins when present."""
    assert _user(name="Jane Roe", login="jroe", firstname="J").display_name == "Jane Roe"


def test_display_name_falls_back_to_name_parts() -> None:
    """First and last name are joined when name is empty."""
    assert _user(firstname="Jane", lastname="Roe").display_name == "Jane Roe"
    assert _user(lastname="Roe").display_name == "Roe"


def test_display_name_falls_back_to_login_then_id() -> None:
    """Login is used next, and the ID as a last resort."""
    assert _user(login="jroe").display_name == "jroe"
    assert _user().display_name == "User 12"
