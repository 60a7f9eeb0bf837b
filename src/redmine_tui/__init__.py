"""redmine-tui entry point.

This package provides a Textual-based terminal client for browsing,
filtering and editing Redmine issues. See `redmine-tui --help` for details.
"""

from redmine_tui.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `redmine-tui` console script."""
    cli()
