"""TUI runner abstraction for testability.

This module provides an ABC for running the Textual application, enabling
CLI tests without starting the Textual event loop.
"""

from abc import ABC, abstractmethod

from redmine_tui.tui.app import RedmineTuiApp


class TuiRunner(ABC):
    """Abstract interface for running TUI applications."""

    @abstractmethod
    def run(self, app: RedmineTuiApp, *, inline: bool) -> None:
        """Run the TUI application.

        Args:
            app: The RedmineTuiApp instance to run
            inline: Render below the prompt instead of the alternate screen
        """
        ...


class RealTuiRunner(TuiRunner):
    """Production implementation that runs the Textual event loop."""

    def run(self, app: RedmineTuiApp, *, inline: bool) -> None:
        app.run(inline=inline)


class FakeTuiRunner(TuiRunner):
    """Test implementation that captures apps without running the event loop.

    Lets CLI tests verify that the correct app was created with the
    correct parameters.
    """

    def __init__(self) -> None:
        """Create FakeTuiRunner with empty app tracking."""
        self._apps_run: list[RedmineTuiApp] = []
        self._inline_flags: list[bool] = []

    def run(self, app: RedmineTuiApp, *, inline: bool) -> None:
        """Capture app without running event loop.

        Args:
            app: The RedmineTuiApp that would have been run
            inline: Inline flag the app would have been run with
        """
        self._apps_run.append(app)
        self._inline_flags.append(inline)

    @property
    def apps_run(self) -> list[RedmineTuiApp]:
        """Apps that were passed to run(), for test assertions only."""
        return self._apps_run

    @property
    def inline_flags(self) -> list[bool]:
        return self._inline_flags
