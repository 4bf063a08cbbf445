"""
Configuration module for the crawl policy engine.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from crawl_policy.config.settings import (
    Settings,
    PolicyDefinition,
    PolicySettings,
    QueueSettings,
    EventSettings,
    LoggingSettings,
)
from crawl_policy.config.loader import (
    load_config,
    get_settings,
    reset_settings,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "PolicyDefinition",
    "PolicySettings",
    "QueueSettings",
    "EventSettings",
    "LoggingSettings",
    "load_config",
    "get_settings",
    "reset_settings",
    "get_default_config_path",
]
