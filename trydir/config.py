"""Persistent JSON config and environment resolution.

Resolves the tries root, UI theme, and log file. Environment mappings are
passed in explicitly so resolution stays deterministic in tests. Malformed
or missing config falls back safely.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .text import expand_home

APP_NAME = "trydir"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_TRIES_PATH = "~/src/tries"
TRY_PATH_ENV = "TRY_PATH"
THEME_ENV = "TRYDIR_THEME"
LOG_FILE_ENV = "TRYDIR_LOG_FILE"


@dataclass(frozen=True)
class Settings:
    tries_path: Path
    theme_name: str | None
    log_file: Path | None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _config_string(config: Mapping[str, object], key: str) -> str | None:
    value = config.get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def resolve_tries_path(
    cli_path: Path | None,
    environ: Mapping[str, str],
    config: Mapping[str, object],
    home: Path | None = None,
) -> Path:
    """Pick the tries root: ``--path``, then ``TRY_PATH``, then config, then ``~/src/tries``."""
    if cli_path is not None:
        return expand_home(str(cli_path), home)
    env_value = environ.get(TRY_PATH_ENV)
    if env_value:
        return expand_home(env_value, home)
    configured = _config_string(config, "tries_path")
    if configured is not None:
        return expand_home(configured, home)
    return expand_home(DEFAULT_TRIES_PATH, home)


def load_settings(
    cli_path: Path | None,
    cli_log_file: Path | None,
    environ: Mapping[str, str],
    config: Mapping[str, object] | None = None,
) -> Settings:
    """Merge command-line options, environment, and the config file."""
    if config is None:
        config = load_config()
    theme_name = environ.get(THEME_ENV) or _config_string(config, "theme")
    raw_log = environ.get(LOG_FILE_ENV) or _config_string(config, "log_file")
    log_file = cli_log_file
    if log_file is None and raw_log:
        log_file = expand_home(raw_log)
    return Settings(
        tries_path=resolve_tries_path(cli_path, environ, config),
        theme_name=theme_name,
        log_file=log_file,
    )
