"""
Event feed module.

Provides deduplication of paginated event feeds against stored etags.
"""

from crawl_policy.events.finder import (
    EventFinder,
    EventRequestor,
    EventStore,
)

__all__ = [
    "EventFinder",
    "EventRequestor",
    "EventStore",
]
