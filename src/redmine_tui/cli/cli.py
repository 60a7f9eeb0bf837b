import logging
import os
from pathlib import Path

import click

from redmine_tui.cli.config import (
    API_KEY_ENV_VAR,
    URL_ENV_VAR,
    ConfigError,
    RedmineConfig,
    default_config_dir,
    default_config_path,
    load_config,
    save_config,
)
from redmine_tui.tui.app import RedmineTuiApp
from redmine_tui.tui.context import RedmineTuiContext
from redmine_tui.tui.data.provider import RedmineDataProvider
from redmine_tui.tui.views.types import SCOPE_CONFIGS, scope_from_cli_name

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

CONFIG_PATH_KEY = "redmine_tui.config_path"


def _configure_debug_logging() -> Path:
    """Send debug logs to a file so they never draw over the TUI."""
    log_dir = default_config_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "debug.log"
    logging.basicConfig(
        filename=log_path,
        level=logging.DEBUG,
        format="%(asctime)s %(name)s - %(levelname)s - %(message)s",
    )
    return log_path


def _user_output(message: str) -> None:
    click.echo(message, err=True)


def run_setup(config_path: Path) -> None:
    """Interactively ask for the server URL and API key and write config.toml.

    Args:
        config_path: Where to write the config file
    """
    _user_output(f"Creating configuration at {config_path}")
    _user_output("  Your API key is under 'My account' > 'API access key' in Redmine.")
    url = click.prompt("  Redmine URL", type=str).strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise click.ClickException(f"URL must start with http:// or https://, got: {url}")
    api_key = click.prompt("  API key", type=str, hide_input=True).strip()
    if not api_key:
        raise click.ClickException("API key must not be empty")

    save_config(config_path, url=url, api_key=api_key)
    _user_output(click.style("✓", fg="green") + f" Wrote {config_path}")


def _load_or_setup(config_path: Path) -> RedmineConfig:
    """Load the config, running first-run setup when there is none."""
    try:
        config = load_config(config_path, os.environ)
        if config is None:
            _user_output(f"No configuration found at {config_path}.")
            _user_output(f"  (Or set {URL_ENV_VAR} and {API_KEY_ENV_VAR}.)")
            run_setup(config_path)
            config = load_config(config_path, os.environ)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if config is None:
        raise click.ClickException(f"Could not load configuration from {config_path}")
    return config


def _config_path(ctx: click.Context) -> Path:
    path = ctx.meta.get(CONFIG_PATH_KEY)
    if path is None:
        return default_config_path()
    return path


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="redmine-tui")
@click.option("--debug", is_flag=True, help="Write debug logs to ~/.config/redmine-tui/debug.log")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.toml",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_path: Path | None) -> None:
    """Browse, filter and edit Redmine issues in the terminal.

    Runs the issue browser when no command is given.
    """
    if debug:
        log_path = _configure_debug_logging()
        logger.debug("Debug logging to %s", log_path)

    if config_path is not None:
        ctx.meta[CONFIG_PATH_KEY] = config_path

    if ctx.invoked_subcommand is None:
        ctx.invoke(browse_cmd)


@click.command("browse")
@click.option("--inline", is_flag=True, help="Render below the prompt instead of full screen")
@click.option(
    "--scope",
    type=click.Choice([config.cli_name for config in SCOPE_CONFIGS], case_sensitive=False),
    default="mine",
    show_default=True,
    help="Start with my issues or all issues",
)
@click.pass_context
def browse_cmd(ctx: click.Context, inline: bool, scope: str) -> None:
    """Open the interactive issue browser.

    Examples:
        redmine-tui
        redmine-tui browse --scope all
        redmine-tui browse --inline
    """
    tui_ctx = ctx.obj
    colors = None
    server_url = ""
    # Only build a production context if not already provided (e.g., by tests)
    if tui_ctx is None:
        config = _load_or_setup(_config_path(ctx))
        tui_ctx = RedmineTuiContext.for_production(url=config.url, api_key=config.api_key)
        colors = config.colors
        server_url = config.url

    logger.debug("Starting browser (scope=%s, inline=%s)", scope, inline)
    app = RedmineTuiApp(
        RedmineDataProvider(tui_ctx.gateway),
        scope=scope_from_cli_name(scope),
        colors=colors,
        server_url=server_url,
    )
    tui_ctx.tui_runner.run(app, inline=inline)


@click.command("setup")
@click.pass_context
def setup_cmd(ctx: click.Context) -> None:
    """Create or replace the configuration file interactively."""
    config_path = _config_path(ctx)
    if config_path.exists():
        if not click.confirm(f"Overwrite the [redmine] settings in {config_path}?", default=True):
            _user_output("Aborted.")
            return
    run_setup(config_path)


cli.add_command(browse_cmd)
cli.add_command(setup_cmd)


def main() -> None:
    """CLI entry point used by the `redmine-tui` console script."""
    cli()
