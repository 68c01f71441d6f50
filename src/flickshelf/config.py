"""Configuration management for FlickShelf."""

from __future__ import annotations

import configparser
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt, field_validator

from flickshelf.ordering import ListSetting
from flickshelf.state.snapshot import STATE_FILE

logger = logging.getLogger(__name__)

STORE_ENV_VAR = "FLICKSHELF_STORE"


class StoreConfig(BaseModel):
    """Where the downloaded library lives."""

    path: str | None = None  # Defaults to the current directory
    state_file: str = STATE_FILE


class PlaybackConfig(BaseModel):
    """Player behaviour."""

    skip_short_ms: PositiveInt = 15000
    skip_long_ms: PositiveInt = 30000
    played_threshold_ms: NonNegativeInt = 0


class LoggingConfig(BaseModel):
    """Logging options."""

    level: str = "WARNING"
    file: str | None = None

    @field_validator("level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def parse_list_setting(value: str) -> ListSetting:
    """Parse a list setting written as "display,ordering".

    Raises:
        ValueError: If the value does not have exactly two known parts.
    """
    parts = [part.strip().lower() for part in value.split(",")]
    if len(parts) != 2:
        raise ValueError(f"expected 'display,ordering', got {value!r}")
    return ListSetting.model_validate({"display": parts[0], "ordering": parts[1]})


class AppConfig(BaseModel):
    """Application configuration."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    lists: dict[str, ListSetting] = Field(default_factory=dict)

    # File the configuration was read from, None when using defaults
    source: Path | None = Field(default=None, exclude=True)

    @field_validator("lists", mode="before")
    @classmethod
    def _parse_lists(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            key: parse_list_setting(setting) if isinstance(setting, str) else setting
            for key, setting in value.items()
        }

    @property
    def store_root(self) -> Path:
        """Resolved store directory."""
        if self.store.path:
            return Path(self.store.path).expanduser()
        return Path.cwd()


def get_config_paths() -> list[Path]:
    """Get list of config file paths to search, in priority order.

    Search order:
    1. Current working directory (flickshelf.ini)
    2. User home directory (~/.flickshelf/flickshelf.ini)
    3. YAML files in the same two places

    Returns:
        List of paths to check for config files.
    """
    cwd = Path.cwd()
    home_dir = Path.home() / ".flickshelf"

    return [
        cwd / "flickshelf.ini",
        home_dir / "flickshelf.ini",
        cwd / "config.yaml",
        cwd / "config.yml",
        home_dir / "config.yaml",
    ]


def find_config_file() -> Path | None:
    """Find the first existing config file.

    Returns:
        Path to config file if found, None otherwise.
    """
    for path in get_config_paths():
        if path.exists():
            return path
    return None


_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} and $VAR references in config values."""
    if isinstance(value, str):

        def replace(match: re.Match[str]) -> str:
            return os.environ.get(match.group(1) or match.group(2), "")

        return _ENV_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _load_ini_config(path: Path) -> dict[str, Any]:
    """Load configuration from INI file.

    Args:
        path: Path to INI config file.

    Returns:
        Dictionary structure matching AppConfig schema.
    """
    # Keep list ids case-sensitive
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    parser.read(path, encoding="utf-8")

    config: dict[str, Any] = {}

    for section in ("store", "playback", "logging"):
        if parser.has_section(section):
            values = {k: v for k, v in parser.items(section) if v.strip()}
            if values:
                config[section] = values

    if parser.has_section("lists"):
        lists: dict[str, str] = {}
        for list_id, value in parser.items("lists"):
            if value.strip():
                lists[list_id] = value
        if lists:
            config["lists"] = lists

    return config


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from file.

    Supports both INI (.ini/.cfg) and YAML (.yaml/.yml) formats.
    Environment variables are expanded in all values, and FLICKSHELF_STORE
    overrides the configured store path.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration.
    """
    if path is None:
        path = find_config_file()

    if path is None or not path.exists():
        raw_config: dict[str, Any] = {}
        path = None
    elif path.suffix in (".ini", ".cfg"):
        raw_config = _load_ini_config(path)
    else:
        raw_config = _load_yaml_config(path)

    config = AppConfig.model_validate(_expand_env_vars(raw_config))
    config.source = path

    store_override = os.environ.get(STORE_ENV_VAR)
    if store_override:
        config.store.path = store_override

    logger.debug("Loaded configuration from %s", path or "defaults")
    return config


def save_default_config(path: Path | None = None, store_path: str = "") -> Path:
    """Save a default INI config file.

    Args:
        path: Where to save. Defaults to ./flickshelf.ini.
        store_path: Store directory to write (optional, can use env var).

    Returns:
        Path to saved config file.
    """
    if path is None:
        path = Path.cwd() / "flickshelf.ini"

    store_value = store_path or "${FLICKSHELF_STORE}"

    default_config = f"""\
# FlickShelf Configuration
# You can use environment variables with ${{VAR}} syntax

[store]
# Directory the downloader syncs into
path = {store_value}
# Snapshot file inside the store
state_file = {STATE_FILE}

[playback]
# Short and long skip distances in milliseconds
skip_short_ms = 15000
skip_long_ms = 30000
# Treat a video as watched this many milliseconds before the end
played_threshold_ms = 0

[logging]
# DEBUG, INFO, WARNING or ERROR
level = WARNING
# Optional file to append errors to
# file = flickshelf.log

[lists]
# Per-list display settings: <list id> = <grid|list>,<index|title|airdate>
# movies = grid,title
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)

    return path
