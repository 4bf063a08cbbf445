"""
Crawl Policy - traversal policy engine for web and content crawlers.

Decides where content is fetched from, whether it needs (re)processing,
whether traversal continues, and which policy discovered resources get.
"""

__version__ = "0.1.0"

from crawl_policy.config import Settings, load_config
from crawl_policy.utils.logging import setup_logging, get_logger
from crawl_policy.core.exceptions import CrawlPolicyError, ConfigurationError
from crawl_policy.policy import (
    TraversalPolicy,
    PolicyCatalog,
    Request,
    get_policy,
    get_short_form,
)

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "CrawlPolicyError",
    "ConfigurationError",
    "TraversalPolicy",
    "PolicyCatalog",
    "Request",
    "get_policy",
    "get_short_form",
]
