"""
Core module for the crawl policy engine.

Contains the exceptions used throughout the package.
"""

from crawl_policy.core.exceptions import (
    CrawlPolicyError,
    ConfigurationError,
    PolicyNotFoundError,
    QueueError,
    EventFeedError,
)

__all__ = [
    # Base
    "CrawlPolicyError",
    # Configuration
    "ConfigurationError",
    "PolicyNotFoundError",
    # Collaborators
    "QueueError",
    "EventFeedError",
]
