import tomllib
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import tomlkit

from redmine_tui.tui.views.types import PaneColors

URL_ENV_VAR = "REDMINE_URL"
API_KEY_ENV_VAR = "REDMINE_API_KEY"


class ConfigError(Exception):
    """The configuration file exists but cannot be used."""


@dataclass(frozen=True)
class RedmineConfig:
    """In-memory representation of `~/.config/redmine-tui/config.toml`.

    Example config.toml:
      [redmine]
      url = "https://redmine.example.com"
      api_key = "0123456789abcdef"

      [colors]
      # Optional border colors
      active_pane_border = "#FF00FF"
      inactive_pane_border = "#874BFD"
    """

    url: str
    api_key: str
    colors: PaneColors


def default_config_dir() -> Path:
    return Path.home() / ".config" / "redmine-tui"


def default_config_path() -> Path:
    return default_config_dir() / "config.toml"


def load_config(config_path: Path, environ: Mapping[str, str]) -> RedmineConfig | None:
    """Load the config file, with REDMINE_URL and REDMINE_API_KEY taking precedence.

    Args:
        config_path: Path to config.toml
        environ: Environment variables (os.environ in production)

    Returns:
        Loaded config, or None if the file does not exist and the
        environment does not provide both the URL and the API key

    Raises:
        ConfigError: If the file is not valid TOML, has a non-table section,
            or lacks the URL or API key
    """
    env_url = environ.get(URL_ENV_VAR, "")
    env_api_key = environ.get(API_KEY_ENV_VAR, "")

    if not config_path.exists():
        if env_url and env_api_key:
            return RedmineConfig(url=env_url, api_key=env_api_key, colors=PaneColors.default())
        return None

    try:
        data = tomllib.loads(config_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    redmine = _table(data, "redmine", config_path)
    url = env_url or str(redmine.get("url", ""))
    api_key = env_api_key or str(redmine.get("api_key", ""))
    if not url:
        raise ConfigError(f"Missing [redmine] url in {config_path}")
    if not api_key:
        raise ConfigError(f"Missing [redmine] api_key in {config_path}")

    defaults = PaneColors.default()
    colors = _table(data, "colors", config_path)
    pane_colors = PaneColors(
        active_pane_border=str(colors.get("active_pane_border", defaults.active_pane_border)),
        inactive_pane_border=str(
            colors.get("inactive_pane_border", defaults.inactive_pane_border)
        ),
    )
    return RedmineConfig(url=url, api_key=api_key, colors=pane_colors)


def _table(data: Mapping[str, Any], name: str, config_path: Path) -> Mapping[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{name}] in {config_path} is not a table")
    return section


def save_config(config_path: Path, *, url: str, api_key: str) -> None:
    """Write the [redmine] section of config.toml.

    Creates the file and its directory if needed. Other sections and
    comments of an existing file are preserved using tomlkit.

    Args:
        config_path: Path to config.toml
        url: Redmine server URL
        api_key: Personal API access key
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)
    else:
        doc = tomlkit.document()

    if "redmine" not in doc:
        cast(dict[str, Any], doc)["redmine"] = tomlkit.table()

    redmine_section = doc["redmine"]
    if not isinstance(redmine_section, MutableMapping):
        raise ConfigError(f"[redmine] in {config_path} is not a table")
    redmine_section["url"] = url
    redmine_section["api_key"] = api_key

    with config_path.open("w", encoding="utf-8") as f:
        tomlkit.dump(doc, f)
