"""BumbleConfig: project-local config for the bumbledb command line.

The library itself never reads config; callers pass a data directory.
Only `bumbledb` (the CLI) goes through load_config().

Default layout (relative to the project root):

    bumbledb.toml         # project config
    .env                  # optional: BUMBLEDB_DATA_DIR=...
    .data/
        <collection>.ndjson

bumbledb.toml example:

    [bumbledb]
    data_dir = ".data"

    [logging]
    level = "WARNING"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_CONFIG_FILENAME = "bumbledb.toml"
_DEFAULT_DATA_DIR = ".data"
_DEFAULT_LOG_LEVEL = "WARNING"
_ENV_DATA_DIR = "BUMBLEDB_DATA_DIR"


@dataclass
class LoggingConfig:
    level: str = _DEFAULT_LOG_LEVEL


@dataclass
class BumbleConfig:
    """Resolved configuration for a bumbledb project."""

    root: Path                      # directory that contains bumbledb.toml
    data_dir: Path = field(default_factory=Path)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def config_path(self) -> Path:
        return self.root / _CONFIG_FILENAME


def _load_env(root: Path) -> dict[str, str]:
    """Parse a simple KEY=VALUE .env file (no external dependency)."""
    env_file = root / ".env"
    if not env_file.exists():
        return {}
    env: dict[str, str] = {}
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            env[k.strip()] = v.strip().strip('"').strip("'")
    return env


def load_config(root: Path | str | None = None) -> BumbleConfig:
    """Load bumbledb.toml from root (or search upward from cwd if root is None)."""
    root_path = _find_root(Path(root) if root else Path.cwd())
    config_path = root_path / _CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_path.exists():
        with config_path.open("rb") as f:
            raw = tomllib.load(f)

    db_section = raw.get("bumbledb", {})
    log_section = raw.get("logging", {})

    # Process environment beats .env, .env beats bumbledb.toml
    env = _load_env(root_path)
    data_rel = (
        os.environ.get(_ENV_DATA_DIR)
        or env.get(_ENV_DATA_DIR)
        or str(db_section.get("data_dir", _DEFAULT_DATA_DIR))
    )

    return BumbleConfig(
        root=root_path,
        data_dir=root_path / data_rel,
        logging=LoggingConfig(
            level=str(log_section.get("level", _DEFAULT_LOG_LEVEL)).upper(),
        ),
    )


def _find_root(start: Path) -> Path:
    """Walk upward from start looking for bumbledb.toml."""
    for directory in (start, *start.parents):
        if (directory / _CONFIG_FILENAME).exists():
            return directory
    return start


def _toml_string(value: str) -> str:
    """Quote value as a TOML basic string."""
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in value):
        msg = f"data_dir contains a control character: {value!r}"
        raise ValueError(msg)
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def init_config(root: Path, data_dir: str | None = None) -> Path:
    """Write a default bumbledb.toml at root. Raises if already exists."""
    config_path = root / _CONFIG_FILENAME
    if config_path.exists():
        msg = f"bumbledb.toml already exists at {config_path}"
        raise FileExistsError(msg)

    content = f"""\
[bumbledb]
data_dir = {_toml_string(data_dir or _DEFAULT_DATA_DIR)}   # or set BUMBLEDB_DATA_DIR in .env

# [logging]
# level = "WARNING"   # DEBUG shows file creation, rewrites and drops
"""
    config_path.write_text(content)
    return config_path
