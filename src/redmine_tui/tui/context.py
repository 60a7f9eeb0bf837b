"""Context holding the dependencies of the TUI.

RedmineTuiContext bundles the Redmine gateway and the TuiRunner so that the
CLI can be exercised with fakes, following the ABC/Real/Fake pattern used
by the gateway.
"""

from dataclasses import dataclass

from redmine_tui.gateway.redmine.abc import RedmineGateway
from redmine_tui.gateway.redmine.fake import FakeRedmineGateway
from redmine_tui.gateway.redmine.real import RealRedmineGateway
from redmine_tui.tui.runner import FakeTuiRunner, RealTuiRunner, TuiRunner


@dataclass(frozen=True)
class RedmineTuiContext:
    """Dependencies of the issue browser.

    Attributes:
        gateway: Redmine API access (real or fake)
        tui_runner: Runs the Textual app (real or fake)
    """

    gateway: RedmineGateway
    tui_runner: TuiRunner

    @classmethod
    def for_production(cls, *, url: str, api_key: str) -> "RedmineTuiContext":
        """Create production context with real implementations.

        Args:
            url: Redmine server URL
            api_key: Personal API access key

        Returns:
            RedmineTuiContext configured for production use
        """
        return cls(
            gateway=RealRedmineGateway(base_url=url, api_key=api_key),
            tui_runner=RealTuiRunner(),
        )

    @classmethod
    def for_test(
        cls,
        *,
        gateway: RedmineGateway | None = None,
        tui_runner: TuiRunner | None = None,
    ) -> "RedmineTuiContext":
        """Create test context with injectable fakes.

        Args:
            gateway: Optional gateway. If None, creates an empty FakeRedmineGateway.
            tui_runner: Optional TuiRunner. If None, creates FakeTuiRunner.

        Returns:
            RedmineTuiContext configured for testing

        Example:
            tui_runner = FakeTuiRunner()
            tui_ctx = RedmineTuiContext.for_test(tui_runner=tui_runner)
            # invoke CLI command with obj=tui_ctx
            assert len(tui_runner.apps_run) == 1
        """
        return cls(
            gateway=gateway or FakeRedmineGateway(),
            tui_runner=tui_runner or FakeTuiRunner(),
        )
