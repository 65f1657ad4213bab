"""
Configuration loader for leaderboard data sources and settings.

Supports loading from:
1. Environment variables (.env.local or deployment secrets)
2. YAML config file (leaderboard.config.yaml)

Environment Variable Aliases (checked in order):
- Data directory: LEADERBOARD_DATA_DIR, DATA_DIR
- Players source: LEADERBOARD_PLAYERS_SOURCE, PLAYERS_FILE
- Selections source: LEADERBOARD_SELECTIONS_SOURCE, SELECTIONS_FILE
- Ranks source: LEADERBOARD_RANKS_SOURCE, RANKS_FILE

Usage:
    from leaderboard.config import get_config, get_settings

    settings = get_settings()
    sources = settings.source_paths()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_PATH = PROJECT_ROOT / "leaderboard.config.yaml"

# Default data files, relative to the data directory
DATA_FILES = {
    "players": "Players.xlsx",
    "selections": "UserSelections.xlsx",
    "ranks": "PlayerRanks.xlsx",
}

LEADERBOARD_SIZE = 5
TOP_PERFORMERS_SIZE = 3


def _load_env_file(env_file: Path = PROJECT_ROOT / ".env.local") -> None:
    """Load environment variables from .env.local if it exists."""
    if env_file.exists():
        with open(env_file, "r") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, _, value = line.partition("=")
                    key = key.strip()
                    value = value.strip()
                    # Remove quotes if present
                    if value.startswith('"') and value.endswith('"'):
                        value = value[1:-1]
                    elif value.startswith("'") and value.endswith("'"):
                        value = value[1:-1]
                    os.environ.setdefault(key, value)


def _load_yaml_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from the YAML file."""
    config_path = config_path or CONFIG_PATH
    if config_path.exists():
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}
    return {}


# Load env file on module import
_load_env_file()


# Order matters: first valid value found wins
ENV_VAR_ALIASES = {
    "data_dir": ["LEADERBOARD_DATA_DIR", "DATA_DIR"],
    "players": ["LEADERBOARD_PLAYERS_SOURCE", "PLAYERS_FILE"],
    "selections": ["LEADERBOARD_SELECTIONS_SOURCE", "SELECTIONS_FILE"],
    "ranks": ["LEADERBOARD_RANKS_SOURCE", "RANKS_FILE"],
    "output_dir": ["LEADERBOARD_OUTPUT_DIR"],
    "leaderboard_size": ["LEADERBOARD_SIZE"],
    "top_performers_size": ["LEADERBOARD_TOP_PERFORMERS"],
    "max_workers": ["LEADERBOARD_MAX_WORKERS"],
    "request_timeout": ["LEADERBOARD_REQUEST_TIMEOUT"],
}

# Where each alias lands in the merged config dictionary
CONFIG_KEY_PATHS = {
    "data_dir": "data.dir",
    "players": "data.sources.players",
    "selections": "data.sources.selections",
    "ranks": "data.sources.ranks",
    "output_dir": "export.output_dir",
    "leaderboard_size": "leaderboard.size",
    "top_performers_size": "leaderboard.top_performers",
    "max_workers": "loader.max_workers",
    "request_timeout": "loader.request_timeout",
}


def _get_env_with_aliases(alias_key: str):
    """
    Get an environment variable value, checking multiple aliases.
    Returns (value, var_name) tuple or (None, None) if not found.
    """
    aliases = ENV_VAR_ALIASES.get(alias_key, [])
    for var_name in aliases:
        value = os.getenv(var_name)
        if value and not _is_placeholder(value):
            return value, var_name
    return None, None


def _is_placeholder(value: Optional[str]) -> bool:
    """Check if a value is a placeholder that should be ignored."""
    if not value:
        return True
    value_lower = value.lower()
    return (
        value_lower.startswith("your_") or
        value_lower.startswith("your-") or
        value == "changeme" or
        value == "placeholder"
    )


def _get_path(config: Dict[str, Any], key_path: str) -> Any:
    obj: Any = config
    for part in key_path.split("."):
        if not isinstance(obj, dict):
            return None
        obj = obj.get(part)
    return obj


@lru_cache(maxsize=1)
def get_config() -> Dict[str, Any]:
    """
    Get the full configuration dictionary.
    Merges YAML config with environment variables (env vars take precedence).
    """
    config = _load_yaml_config()

    for alias_key, key_path in CONFIG_KEY_PATHS.items():
        value, _ = _get_env_with_aliases(alias_key)
        if value:
            parts = key_path.split(".")
            obj = config
            for part in parts[:-1]:
                obj = obj.setdefault(part, {})
            obj[parts[-1]] = value

    return config


def is_remote(source: str) -> bool:
    """True for http(s) sources that must be fetched rather than opened."""
    return str(source).lower().startswith(("http://", "https://"))


@dataclass
class LeaderboardSettings:
    """Settings for a single leaderboard run."""
    data_dir: Path = PROJECT_ROOT / "data"
    players_file: str = DATA_FILES["players"]
    selections_file: str = DATA_FILES["selections"]
    ranks_file: str = DATA_FILES["ranks"]

    leaderboard_size: int = LEADERBOARD_SIZE
    top_performers_size: int = TOP_PERFORMERS_SIZE

    # Loader
    max_workers: int = 3
    request_timeout: int = 20  # seconds

    output_dir: Path = PROJECT_ROOT / "public" / "data"

    def _resolve(self, source: str) -> str:
        if is_remote(source):
            return source
        path = Path(source)
        if not path.is_absolute():
            path = Path(self.data_dir) / path
        return str(path)

    def source_paths(self) -> Dict[str, str]:
        """Resolved location of each named source (URLs pass through)."""
        return {
            "players": self._resolve(self.players_file),
            "selections": self._resolve(self.selections_file),
            "ranks": self._resolve(self.ranks_file),
        }


def settings_from_config(config: Dict[str, Any]) -> LeaderboardSettings:
    """Build settings from a merged config dictionary, keeping defaults for gaps."""
    settings = LeaderboardSettings()

    data_dir = _get_path(config, "data.dir")
    if data_dir:
        path = Path(data_dir)
        settings.data_dir = path if path.is_absolute() else PROJECT_ROOT / path

    for name, attr in (
        ("players", "players_file"),
        ("selections", "selections_file"),
        ("ranks", "ranks_file"),
    ):
        value = _get_path(config, f"data.sources.{name}")
        if value:
            setattr(settings, attr, str(value))

    output_dir = _get_path(config, "export.output_dir")
    if output_dir:
        path = Path(output_dir)
        settings.output_dir = path if path.is_absolute() else PROJECT_ROOT / path

    for key_path, attr in (
        ("leaderboard.size", "leaderboard_size"),
        ("leaderboard.top_performers", "top_performers_size"),
        ("loader.max_workers", "max_workers"),
        ("loader.request_timeout", "request_timeout"),
    ):
        value = _get_path(config, key_path)
        if value is not None and value != "":
            try:
                setattr(settings, attr, int(value))
            except (TypeError, ValueError):
                raise ValueError(f"Invalid integer for {key_path}: {value!r}")

    return settings


def get_settings() -> LeaderboardSettings:
    """Get settings for the current environment."""
    return settings_from_config(get_config())


def validate_config(settings: Optional[LeaderboardSettings] = None) -> List[str]:
    """
    Validate the configured settings.
    Returns a list of issues (empty if all is well).
    """
    settings = settings or get_settings()
    issues = []

    for attr in ("leaderboard_size", "top_performers_size", "max_workers", "request_timeout"):
        if getattr(settings, attr) <= 0:
            issues.append(f"{attr} must be positive, got {getattr(settings, attr)}")

    for name, source in settings.source_paths().items():
        if not is_remote(source) and not Path(source).exists():
            issues.append(f"{name} source not found: {source}")

    return issues


if __name__ == "__main__":
    print("=== Configuration Test ===\n")

    print("Supported environment variable names:")
    for key, aliases in ENV_VAR_ALIASES.items():
        print(f"  {key}: {', '.join(aliases)}")
    print()

    current = get_settings()
    print("Sources:")
    for name, source in current.source_paths().items():
        print(f"  {name}: {source}")
    print()

    issues = validate_config(current)
    if issues:
        print("Configuration issues:")
        for issue in issues:
            print(f"  - {issue}")
    else:
        print("Configuration OK.")
