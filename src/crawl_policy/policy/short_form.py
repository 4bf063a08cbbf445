"""
Compact four-character policy signatures for logs and dedup keys.
"""

from crawl_policy.core.exceptions import ConfigurationError
from crawl_policy.policy.values import (
    AfterDays,
    FetchMode,
    Freshness,
    ProcessingDepth,
    TraversalPolicy,
    Transitivity,
)

FETCH_CODES = {
    FetchMode.STORAGE_ONLY: "S",
    FetchMode.STORAGE_ORIGIN_IF_MISSING: "s",
    FetchMode.ORIGIN_ONLY: "O",
    FetchMode.ORIGIN_STORAGE: "o",
}

FRESHNESS_CODES = {
    Freshness.ALWAYS: "A",
    Freshness.MATCH: "M",
    Freshness.VERSION: "V",
    Freshness.MATCH_OR_VERSION: "m",
}

AFTER_DAYS_CODE = "N"

PROCESSING_CODES = {
    ProcessingDepth.DOCUMENT_ONLY: "D",
    ProcessingDepth.DOCUMENT_AND_RELATED: "r",
    ProcessingDepth.DOCUMENT_AND_CHILDREN: "c",
}

TRANSITIVITY_CODES = {
    Transitivity.SHALLOW: "S",
    Transitivity.DEEP_SHALLOW: "d",
    Transitivity.DEEP_DEEP: "D",
}


def _code(table: dict, field_name: str, value: object) -> str:
    try:
        return table[value]
    except (KeyError, TypeError):
        raise ConfigurationError(
            f"No short form for {field_name} in traversal policy",
            field=field_name,
            value=value,
        ) from None


def get_short_form(policy: TraversalPolicy) -> str:
    """
    Encode a policy as fetch + freshness + processing + transitivity codes.

    Example:
        >>> from crawl_policy.policy.catalog import default
        >>> get_short_form(default())
        'oMrS'

    Raises:
        ConfigurationError: If any field has no code
    """
    if isinstance(policy.freshness, AfterDays):
        freshness = AFTER_DAYS_CODE
    else:
        freshness = _code(FRESHNESS_CODES, "freshness", policy.freshness)
    return (
        _code(FETCH_CODES, "fetch", policy.fetch)
        + freshness
        + _code(PROCESSING_CODES, "processing", policy.processing)
        + _code(TRANSITIVITY_CODES, "transitivity", policy.transitivity)
    )
