"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import LearntrackConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per session
_config_cache: LearntrackConfig | None = None

_TRUE_VALUES = ("1", "true", "yes", "on")


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/learntrack/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "learntrack" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .learntrack.json in the working directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".learntrack.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`. Nested
    dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 2}})
        {'a': 1, 'b': {'x': 10, 'y': 2}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            logger.warning("Ignoring config at %s: top level is not an object", path)
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        LEARNTRACK_FIRESTORE_ENABLED - overrides firestore.enabled
        LEARNTRACK_FIRESTORE_PROJECT - overrides firestore.project_id
        FIREBASE_PROJECT_ID - firestore.project_id when the above is unset
        LEARNTRACK_FIRESTORE_DATABASE - overrides firestore.database
        FIRESTORE_EMULATOR_HOST - overrides firestore.emulator_host
        GOOGLE_APPLICATION_CREDENTIALS - overrides firestore.credentials_file
        LEARNTRACK_DATE_FORMAT - overrides display.date_format

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()
    firestore = dict(result.get("firestore") or {})

    if enabled_str := os.environ.get("LEARNTRACK_FIRESTORE_ENABLED"):
        firestore["enabled"] = enabled_str.strip().lower() in _TRUE_VALUES

    project_id = os.environ.get("LEARNTRACK_FIRESTORE_PROJECT") or os.environ.get(
        "FIREBASE_PROJECT_ID"
    )
    if project_id:
        firestore["project_id"] = project_id

    if database := os.environ.get("LEARNTRACK_FIRESTORE_DATABASE"):
        firestore["database"] = database

    if emulator := os.environ.get("FIRESTORE_EMULATOR_HOST"):
        firestore["emulator_host"] = emulator

    if credentials := os.environ.get("GOOGLE_APPLICATION_CREDENTIALS"):
        firestore["credentials_file"] = credentials

    if firestore:
        result["firestore"] = firestore

    if date_format := os.environ.get("LEARNTRACK_DATE_FORMAT"):
        display = dict(result.get("display") or {})
        display["date_format"] = date_format
        result["display"] = display

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "firestore": {"enabled": True, "database": "(default)"},
        "display": {},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> LearntrackConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables
        2. Project config (.learntrack.json)
        3. User config (~/.config/learntrack/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .learntrack.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated LearntrackConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = LearntrackConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
