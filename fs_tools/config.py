"""Configuration loading for the fs-tools server."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.expanduser("~/.fs-tools.json")
CONFIG_PATH_ENV = "FS_TOOLS_CONFIG"
LOG_LEVEL_ENV = "FS_TOOLS_LOG_LEVEL"

DEFAULT_DISALLOWED_COMMANDS = (
    "rm",
    "rmdir",
    "mv",
    "del",
    "erase",
    "dd",
    "mkfs",
    "format",
)


@dataclass(frozen=True)
class Settings:
    """Tunables for the tools and the server.

    Attributes:
        bash_timeout_seconds: Default executeBash deadline
        fetch_timeout_ms: Default fetchWebpage timeout
        grep_max_results: Default grepFiles result cap
        disallowed_commands: Commands executeBash refuses to run
        log_level: Logging level name for the server process
    """

    bash_timeout_seconds: int = 30
    fetch_timeout_ms: int = 10000
    grep_max_results: int = 100
    disallowed_commands: tuple[str, ...] = field(
        default=DEFAULT_DISALLOWED_COMMANDS
    )
    log_level: str = "INFO"


def default_config_path() -> str:
    return os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load raw config from disk. Returns empty dict if not found or invalid."""
    path = path or default_config_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}


def load_settings(path: str | None = None) -> Settings:
    """Build Settings from the config file and environment overrides.

    Unknown keys are ignored; values of the wrong type fall back to defaults.
    """
    raw = load_config(path)
    defaults = Settings()
    values: dict[str, Any] = {}

    for f in dataclasses.fields(Settings):
        if f.name not in raw:
            continue
        value = raw[f.name]
        default = getattr(defaults, f.name)
        if isinstance(default, tuple):
            if isinstance(value, list) and all(isinstance(v, str) for v in value):
                values[f.name] = tuple(value)
                continue
        elif isinstance(value, type(default)) and not isinstance(value, bool):
            values[f.name] = value
            continue
        logger.warning("Ignoring invalid config value for %s: %r", f.name, value)

    env_level = os.environ.get(LOG_LEVEL_ENV)
    if env_level:
        values["log_level"] = env_level

    return dataclasses.replace(defaults, **values)
