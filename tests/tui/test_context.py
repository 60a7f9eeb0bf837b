"""Tests for RedmineTuiContext and the TUI runners."""

from redmine_tui.gateway.redmine.fake import FakeRedmineGateway
from redmine_tui.gateway.redmine.real import RealRedmineGateway
from redmine_tui.tui.app import RedmineTuiApp
from redmine_tui.tui.context import RedmineTuiContext
from redmine_tui.tui.data.provider import RedmineDataProvider
from redmine_tui.tui.runner import FakeTuiRunner, RealTuiRunner


def test_for_test_defaults_to_fakes() -> None:
    """A test context never touches the network or the terminal."""
    ctx = RedmineTuiContext.for_test()

    assert isinstance(ctx.gateway, FakeRedmineGateway)
    assert isinstance(ctx.tui_runner, FakeTuiRunner)


def test_for_production_uses_real_implementations() -> None:
    """The production context wires the HTTP gateway and the Textual runner."""
    ctx = RedmineTuiContext.for_production(url="https://redmine.example.com", api_key="k")

    assert isinstance(ctx.gateway, RealRedmineGateway)
    assert isinstance(ctx.tui_runner, RealTuiRunner)


def test_fake_runner_records_apps() -> None:
    """FakeTuiRunner captures the app and its inline flag without running it."""
    runner = FakeTuiRunner()
    app = RedmineTuiApp(RedmineDataProvider(FakeRedmineGateway()))

    runner.run(app, inline=True)

    assert runner.apps_run == [app]
    assert runner.inline_flags == [True]
