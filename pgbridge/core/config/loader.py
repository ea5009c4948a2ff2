"""
Configuration loader — defaults, then an optional YAML file, then env vars.

The bridge normally runs as a subprocess of the IDE with everything in
its environment.  A ``pgbridge.yml`` is optional and mostly useful for
local development.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from pgbridge.core.errors import BridgeError
from pgbridge.core.models.config import BridgeConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "pgbridge.yml"

# Env var → config key.  Later entries win when several map to one key.
ENV_KEYS: tuple[tuple[str, str], ...] = (
    ("MCP_SERVER_URL", "mcpServerUrl"),
    ("MCP_SERVER_TIMEOUT", "timeout"),
    ("AUTO_BACKUP", "autoBackup"),
    ("BACKUP_DIR", "backupDir"),
    ("LOG_LEVEL", "logLevel"),
    ("PGBRIDGE_LOG_FILE", "logFile"),
    ("PROJECT_PATH", "ideProjectPath"),
    ("CURSOR_PROJECT_PATH", "ideProjectPath"),
)


class ConfigError(BridgeError):
    """Raised when the bridge configuration is invalid or unreadable."""

    label = "Invalid configuration"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for pgbridge.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to pgbridge.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def read_config_file(path: Path) -> dict:
    """Read a YAML config file into a flat mapping.

    Raises:
        ConfigError: If the file is unreadable, not YAML, or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Allow everything to sit under a "pgbridge" key
    return dict(data.get("pgbridge", data)) if "pgbridge" in data else data


def env_overrides(env: Mapping[str, str] | None = None) -> dict:
    """Collect config keys set through the environment."""
    env = os.environ if env is None else env
    values: dict = {}
    for var, key in ENV_KEYS:
        value = env.get(var)
        if value is not None and value.strip() != "":
            values[key] = value.strip()
    return values


def load_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
    *,
    search: bool = True,
) -> BridgeConfig:
    """Load and validate the bridge configuration.

    Args:
        path: Explicit config file. If None and ``search`` is set, looks
            for pgbridge.yml upward from the cwd.
        env: Environment mapping (default: ``os.environ``).
        search: Whether to auto-discover a config file.

    Returns:
        Validated BridgeConfig.

    Raises:
        ConfigError: If the file or the merged values are invalid.
    """
    data: dict = {}

    if path is None and search:
        path = find_config_file()

    if path is not None:
        logger.debug("Loading bridge config from %s", path)
        data.update(read_config_file(path))

    data.update(env_overrides(env))

    try:
        config = BridgeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid bridge configuration: {e}") from e

    logger.debug(
        "Config: server=%s timeout=%dms backup=%s dir=%s",
        config.mcp_server_url, config.timeout, config.auto_backup, config.backup_dir,
    )
    return config
