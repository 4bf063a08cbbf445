"""
Utilities module for the crawl policy engine.

Provides logging setup and in-memory counters.
"""

from crawl_policy.utils.logging import (
    setup_logging,
    get_logger,
    get_logger_with_context,
    reset_logging,
)
from crawl_policy.utils.metrics import Metrics

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "get_logger_with_context",
    "reset_logging",
    # Metrics
    "Metrics",
]
