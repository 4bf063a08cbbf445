"""
Configuration loader with YAML file support and environment variable overrides.

Priority (highest to lowest):
1. Environment variables
2. YAML configuration file
3. Default values (defined in settings.py)

Environment variables use the pattern: CRAWL_POLICY__{SECTION}__{KEY}
Example: CRAWL_POLICY__POLICY__DEFAULT_POLICY=refresh
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from crawl_policy.config.settings import Settings
from crawl_policy.core.exceptions import ConfigurationError

ENV_PREFIX = "CRAWL_POLICY"

_settings_instance: Settings | None = None


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge `override` into a copy of `base`, recursing into nested dicts."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _parse_env_value(value: str) -> Any:
    """
    Parse an environment variable string into a Python value.

    Booleans are only recognized by name, so "1" and "0" stay numeric
    (processing versions and page counts are plain integers).
    """
    lowered = value.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    if lowered in ("none", "null", ""):
        return None

    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            pass

    return value


def _normalize_env_segment(part: str) -> str:
    if any(c.islower() for c in part):
        return part
    return part.lower()


def _load_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """
    Collect {PREFIX}__{SECTION}__{KEY} variables into a nested dict.

    Deeper paths are allowed, e.g.
    CRAWL_POLICY__POLICY__CUSTOM__NIGHTLY__FRESHNESS=7

    All-uppercase segments are lowercased. Segments containing a lowercase
    letter are kept as written, so mixed-case names such as custom policy
    keys survive: CRAWL_POLICY__POLICY__CUSTOM__nightlyRefresh__FETCH.
    """
    overrides: dict[str, Any] = {}
    prefix_with_sep = f"{prefix}__"

    for key, value in os.environ.items():
        if not key.startswith(prefix_with_sep):
            continue

        key_path = [
            _normalize_env_segment(part)
            for part in key[len(prefix_with_sep):].split("__")
        ]
        if len(key_path) < 2:
            continue

        current = overrides
        for part in key_path[:-1]:
            current = current.setdefault(part, {})
        current[key_path[-1]] = _parse_env_value(value)

    return overrides


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load configuration from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is not valid YAML or not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}",
                details={"path": str(path)},
            ) from e

    if content is None:
        return {}

    if not isinstance(content, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got: {type(content).__name__}",
            details={"path": str(path)},
        )

    return content


def load_config(
    config_path: Path | str | None = None,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to YAML configuration file. If None, uses defaults only.
        env_prefix: Prefix for environment variables

    Returns:
        Validated Settings instance

    Raises:
        FileNotFoundError: If config_path is specified but doesn't exist
        ConfigurationError: If the file or the resulting values are invalid
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_data = _deep_merge(config_data, _load_yaml_file(Path(config_path)))

    config_data = _deep_merge(config_data, _load_env_overrides(env_prefix))

    try:
        return Settings(**config_data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def get_settings(
    config_path: Path | str | None = None,
    reload: bool = False,
) -> Settings:
    """
    Get the process-wide Settings instance, loading it on first use.

    Args:
        config_path: YAML file, only read on first load or reload
        reload: Force a reload
    """
    global _settings_instance

    if _settings_instance is None or reload:
        _settings_instance = load_config(config_path)

    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings instance."""
    global _settings_instance
    _settings_instance = None


def get_default_config_path() -> Path | None:
    """
    Find a configuration file in the usual locations.

    Searches:
    1. ./crawl_policy.yaml
    2. ./config/crawl_policy.yaml
    3. ~/.crawl_policy/config.yaml
    """
    search_paths = [
        Path.cwd() / "crawl_policy.yaml",
        Path.cwd() / "config" / "crawl_policy.yaml",
        Path.home() / ".crawl_policy" / "config.yaml",
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None
