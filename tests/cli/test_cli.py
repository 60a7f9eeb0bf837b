"""Tests for the redmine-tui command line."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from redmine_tui.cli.cli import cli
from redmine_tui.cli.config import API_KEY_ENV_VAR, URL_ENV_VAR, load_config
from redmine_tui.tui.context import RedmineTuiContext
from redmine_tui.tui.runner import FakeTuiRunner
from redmine_tui.tui.views.types import IssueScope


def _invoke(args: list[str], tui_runner: FakeTuiRunner):
    runner = CliRunner()
    return runner.invoke(cli, args, obj=RedmineTuiContext.for_test(tui_runner=tui_runner))


def test_no_command_runs_browser() -> None:
    """Running without a subcommand opens the browser."""
    tui_runner = FakeTuiRunner()

    result = _invoke([], tui_runner)

    assert result.exit_code == 0, result.output
    assert len(tui_runner.apps_run) == 1
    assert tui_runner.inline_flags == [False]
    assert tui_runner.apps_run[0].session_state.scope == IssueScope.MINE


def test_browse_scope_and_inline() -> None:
    """--scope and --inline reach the app and the runner."""
    tui_runner = FakeTuiRunner()

    result = _invoke(["browse", "--scope", "all", "--inline"], tui_runner)

    assert result.exit_code == 0, result.output
    assert tui_runner.apps_run[0].session_state.scope == IssueScope.ALL
    assert tui_runner.inline_flags == [True]


def test_invalid_scope_is_rejected() -> None:
    """Unknown scopes fail before anything runs."""
    tui_runner = FakeTuiRunner()

    result = _invoke(["browse", "--scope", "team"], tui_runner)

    assert result.exit_code != 0
    assert tui_runner.apps_run == []


def test_setup_writes_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """setup prompts for the URL and key and writes config.toml."""
    monkeypatch.delenv(URL_ENV_VAR, raising=False)
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    config_path = tmp_path / "config.toml"

    result = CliRunner().invoke(
        cli,
        ["--config", str(config_path), "setup"],
        input="https://redmine.example.com/\nsecret\n",
    )

    assert result.exit_code == 0, result.output
    config = load_config(config_path, {})
    assert config is not None
    assert config.url == "https://redmine.example.com"
    assert config.api_key == "secret"


def test_setup_rejects_bad_url(tmp_path: Path) -> None:
    """The URL must include its scheme."""
    config_path = tmp_path / "config.toml"

    result = CliRunner().invoke(
        cli, ["--config", str(config_path), "setup"], input="redmine.example.com\n"
    )

    assert result.exit_code != 0
    assert "must start with http" in result.output
    assert not config_path.exists()


def test_setup_keeps_existing_config_when_declined(tmp_path: Path) -> None:
    """Declining the overwrite prompt leaves the file alone."""
    config_path = tmp_path / "config.toml"
    config_path.write_text('[redmine]\nurl = "https://old.example.com"\napi_key = "old"\n')

    result = CliRunner().invoke(cli, ["--config", str(config_path), "setup"], input="n\n")

    assert result.exit_code == 0, result.output
    config = load_config(config_path, {})
    assert config is not None
    assert config.url == "https://old.example.com"


def test_invalid_config_is_reported(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A broken config file stops the browser with a readable error."""
    monkeypatch.delenv(URL_ENV_VAR, raising=False)
    monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
    config_path = tmp_path / "config.toml"
    config_path.write_text("[redmine\n")

    result = CliRunner().invoke(cli, ["--config", str(config_path)])

    assert result.exit_code == 1
    assert "Invalid TOML" in result.output
