"""
config.py - Settings for networked games

GameConfig holds the connection and logging settings the CLI passes into the
engine. Settings can be kept in a JSON file; reads and writes go through a
file lock and writes replace the file atomically, so two game processes
started from the same directory do not corrupt it.
"""

import json
import os
import shutil
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

import filelock

from connect4net.debug import debug

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 4000
CONFIG_FILE = 'connect4net.json'
CONFIG_ENV_VAR = 'CONNECT4NET_CONFIG'


@dataclass
class GameConfig:
    """Settings for one game process."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    seed: Optional[int] = None
    debug_level: str = "warning"
    # Applies to connect only; accept and reads never time out
    connect_timeout: Optional[float] = None

    def __post_init__(self):
        if not 0 <= int(self.port) <= 65535:
            raise ValueError(f"port out of range: {self.port}")
        self.port = int(self.port)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameConfig':
        """Build a config from a dict, ignoring keys it does not know."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            debug.warning(f"Ignoring unknown config keys: {sorted(unknown)}", "config")
        return cls(**{k: v for k, v in data.items() if k in known})

    def merged(self, **overrides) -> 'GameConfig':
        """Copy of this config with every non-None override applied."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GameConfig(**data)


def default_config_path() -> str:
    return os.environ.get(CONFIG_ENV_VAR) or os.path.join(os.getcwd(), CONFIG_FILE)


def safe_read_json(file_path: str) -> Dict[str, Any]:
    """
    Read a JSON object under a file lock.

    Returns:
        The parsed object, or an empty dict if the file is missing or invalid
    """
    if not os.path.exists(file_path):
        return {}

    with filelock.FileLock(f"{file_path}.lock"):
        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError:
            debug.error(f"Error decoding JSON from {file_path}", "config")
            return {}

    if not isinstance(data, dict):
        debug.error(f"Expected a JSON object in {file_path}", "config")
        return {}
    return data


def safe_write_json(file_path: str, data: Dict[str, Any]) -> None:
    """Write a JSON object under a file lock, replacing the file atomically."""
    directory = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(directory, exist_ok=True)
    with filelock.FileLock(f"{file_path}.lock"):
        temp_file = f"{file_path}.tmp"
        with open(temp_file, 'w') as f:
            json.dump(data, f, indent=2)
        shutil.move(temp_file, file_path)


def load_config(path: Optional[str] = None) -> GameConfig:
    """
    Load settings from `path` (or the default location).

    Missing files yield the defaults.
    """
    path = path or default_config_path()
    data = safe_read_json(path)
    config = GameConfig.from_dict(data) if data else GameConfig()
    debug.debug(f"Loaded config from {path}: {config}", "config")
    return config


def save_config(config: GameConfig, path: Optional[str] = None) -> str:
    """
    Save settings to `path` (or the default location).

    Returns:
        The path written
    """
    path = path or default_config_path()
    safe_write_json(path, config.to_dict())
    debug.info(f"Saved config to {path}", "config")
    return path
