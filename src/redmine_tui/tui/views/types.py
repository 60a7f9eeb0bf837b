"""View mode types for the issue browser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ViewMode(Enum):
    """Input modes of the issue browser. Exactly one is active at a time."""

    BROWSE = auto()
    TEXT_FILTER_INPUT = auto()
    USER_PICKER = auto()
    PROJECT_PICKER = auto()
    EDIT_SESSION = auto()


class IssueScope(Enum):
    """Which issues the server is asked for."""

    MINE = auto()
    ALL = auto()


@dataclass(frozen=True)
class ScopeConfig:
    """Configuration for a specific issue scope.

    Attributes:
        scope: The scope this config describes
        display_name: Human-readable name shown in the footer
        cli_name: Value accepted by the --scope CLI option
    """

    scope: IssueScope
    display_name: str
    cli_name: str


MINE_SCOPE = ScopeConfig(scope=IssueScope.MINE, display_name="My Issues", cli_name="mine")

ALL_SCOPE = ScopeConfig(scope=IssueScope.ALL, display_name="All Issues", cli_name="all")

SCOPE_CONFIGS: tuple[ScopeConfig, ...] = (MINE_SCOPE, ALL_SCOPE)


def get_scope_config(scope: IssueScope) -> ScopeConfig:
    """Look up the ScopeConfig for a given scope.

    Args:
        scope: The scope to look up

    Returns:
        The corresponding ScopeConfig
    """
    for config in SCOPE_CONFIGS:
        if config.scope == scope:
            return config
    return ALL_SCOPE


def scope_from_cli_name(name: str) -> IssueScope:
    """Resolve a --scope option value ("mine" or "all") to an IssueScope."""
    for config in SCOPE_CONFIGS:
        if config.cli_name == name.lower():
            return config.scope
    raise ValueError(f"Unknown scope: {name}")


@dataclass(frozen=True)
class PaneColors:
    """Border colors of the list and detail panes.

    Attributes:
        active_pane_border: Border of the pane that receives input
        inactive_pane_border: Border of the other pane
    """

    active_pane_border: str
    inactive_pane_border: str

    @classmethod
    def default(cls) -> PaneColors:
        return cls(active_pane_border="#FF00FF", inactive_pane_border="#874BFD")
