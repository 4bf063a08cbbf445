"""
Crawler module for the crawl policy engine.

Provides the traversal queue and the per-resource planner that applies
policies to fetched resources.
"""

from crawl_policy.crawler.queue import (
    TraversalQueue,
    ResourcePriority,
    QueuedResource,
    normalize_url,
)
from crawl_policy.crawler.planner import (
    TraversalPlanner,
    DiscoveredResource,
    FetchPlan,
    TraversalDecision,
)

__all__ = [
    # Queue
    "TraversalQueue",
    "ResourcePriority",
    "QueuedResource",
    "normalize_url",
    # Planner
    "TraversalPlanner",
    "DiscoveredResource",
    "FetchPlan",
    "TraversalDecision",
]
