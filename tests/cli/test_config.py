"""Tests for loading and saving config.toml."""

from pathlib import Path

import pytest

from redmine_tui.cli.config import (
    API_KEY_ENV_VAR,
    URL_ENV_VAR,
    ConfigError,
    load_config,
    save_config,
)
from redmine_tui.tui.views.types import PaneColors


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_missing_file_without_env_returns_none(tmp_path: Path) -> None:
    """No file and no environment means first-run setup is needed."""
    assert load_config(tmp_path / "config.toml", {}) is None


def test_env_vars_alone_are_enough(tmp_path: Path) -> None:
    """REDMINE_URL and REDMINE_API_KEY work without a file."""
    config = load_config(
        tmp_path / "config.toml",
        {URL_ENV_VAR: "https://env.example.com", API_KEY_ENV_VAR: "envkey"},
    )

    assert config is not None
    assert config.url == "https://env.example.com"
    assert config.api_key == "envkey"
    assert config.colors == PaneColors.default()


def test_reads_file_with_colors(tmp_path: Path) -> None:
    """The file provides credentials and optional pane colors."""
    path = _write(
        tmp_path / "config.toml",
        '[redmine]\nurl = "https://file.example.com"\napi_key = "filekey"\n\n'
        '[colors]\nactive_pane_border = "#00FF00"\n',
    )

    config = load_config(path, {})

    assert config is not None
    assert config.url == "https://file.example.com"
    assert config.colors.active_pane_border == "#00FF00"
    assert config.colors.inactive_pane_border == "#874BFD"


def test_env_overrides_file(tmp_path: Path) -> None:
    """Environment variables take precedence over the file."""
    path = _write(
        tmp_path / "config.toml",
        '[redmine]\nurl = "https://file.example.com"\napi_key = "filekey"\n',
    )

    config = load_config(path, {API_KEY_ENV_VAR: "envkey"})

    assert config is not None
    assert config.url == "https://file.example.com"
    assert config.api_key == "envkey"


def test_invalid_toml_raises(tmp_path: Path) -> None:
    """A broken file is reported, not ignored."""
    path = _write(tmp_path / "config.toml", "[redmine\nurl = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(path, {})


def test_missing_api_key_raises(tmp_path: Path) -> None:
    """Both credentials are required."""
    path = _write(tmp_path / "config.toml", '[redmine]\nurl = "https://x.example.com"\n')

    with pytest.raises(ConfigError, match="api_key"):
        load_config(path, {})


@pytest.mark.parametrize(
    ("content", "section"),
    [
        ('redmine = "https://x.example.com"\n', "redmine"),
        ('colors = "red"\n[redmine]\nurl = "https://x.example.com"\napi_key = "k"\n', "colors"),
    ],
)
def test_non_table_section_raises(tmp_path: Path, content: str, section: str) -> None:
    """A section written as a plain value is a config error."""
    path = _write(tmp_path / "config.toml", content)

    with pytest.raises(ConfigError, match=rf"\[{section}\] .* is not a table"):
        load_config(path, {})


def test_save_creates_file(tmp_path: Path) -> None:
    """Saving creates the directory and a loadable file."""
    path = tmp_path / "nested" / "config.toml"

    save_config(path, url="https://new.example.com", api_key="newkey")

    config = load_config(path, {})
    assert config is not None
    assert config.url == "https://new.example.com"
    assert config.api_key == "newkey"


def test_save_preserves_other_sections(tmp_path: Path) -> None:
    """Existing comments and sections survive a save."""
    path = _write(
        tmp_path / "config.toml",
        '# my settings\n[redmine]\nurl = "https://old.example.com"\napi_key = "old"\n\n'
        '[colors]\nactive_pane_border = "#123456"\n',
    )

    save_config(path, url="https://new.example.com", api_key="new")

    content = path.read_text(encoding="utf-8")
    assert "# my settings" in content
    assert 'active_pane_border = "#123456"' in content
    assert 'url = "https://new.example.com"' in content
