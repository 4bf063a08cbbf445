"""
Traversal policy engine.

Provides the policy value object, named presets, the decision
functions, propagation rules and short-form encoding.
"""

from crawl_policy.policy.values import (
    AfterDays,
    FetchMode,
    FetchSource,
    Freshness,
    FreshnessRule,
    ProcessingDepth,
    Transitivity,
    TraversalPolicy,
    clone,
)
from crawl_policy.policy.catalog import PRESETS, PolicyCatalog, get_policy
from crawl_policy.policy.request import (
    ContentOrigin,
    Document,
    DocumentMetadata,
    Request,
)
from crawl_policy.policy.decisions import (
    fetch_sources,
    initial_fetch,
    missing_fetch,
    should_fetch_existing,
    should_process,
    should_traverse,
)
from crawl_policy.policy.propagation import (
    create_policy_for,
    create_policy_for_child,
    create_policy_for_root,
)
from crawl_policy.policy.short_form import get_short_form

__all__ = [
    # Values
    "AfterDays",
    "FetchMode",
    "FetchSource",
    "Freshness",
    "FreshnessRule",
    "ProcessingDepth",
    "Transitivity",
    "TraversalPolicy",
    "clone",
    # Catalog
    "PRESETS",
    "PolicyCatalog",
    "get_policy",
    # Request
    "ContentOrigin",
    "Document",
    "DocumentMetadata",
    "Request",
    # Decisions
    "fetch_sources",
    "initial_fetch",
    "missing_fetch",
    "should_fetch_existing",
    "should_process",
    "should_traverse",
    # Propagation
    "create_policy_for",
    "create_policy_for_child",
    "create_policy_for_root",
    # Short form
    "get_short_form",
]
