"""
Decision functions answering fetch, process and traverse questions.

All functions are pure: they read the policy and request and never
perform I/O or mutate their inputs.
"""

import logging
from datetime import datetime, timezone

from crawl_policy.core.exceptions import ConfigurationError
from crawl_policy.policy.request import ContentOrigin, Request
from crawl_policy.policy.short_form import get_short_form
from crawl_policy.policy.values import (
    AfterDays,
    FetchMode,
    FetchSource,
    Freshness,
    TraversalPolicy,
    Transitivity,
)
from crawl_policy.utils.logging import get_logger

logger = get_logger(__name__)

SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24

INITIAL_SOURCES: dict[FetchMode, FetchSource] = {
    FetchMode.STORAGE_ONLY: FetchSource.STORAGE,
    FetchMode.ORIGIN_STORAGE: FetchSource.ORIGIN,
    FetchMode.STORAGE_ORIGIN_IF_MISSING: FetchSource.STORAGE,
    FetchMode.ORIGIN_ONLY: FetchSource.ORIGIN,
}

MISSING_SOURCES: dict[FetchMode, FetchSource | None] = {
    FetchMode.STORAGE_ONLY: None,
    FetchMode.ORIGIN_STORAGE: FetchSource.ORIGIN,
    FetchMode.STORAGE_ORIGIN_IF_MISSING: FetchSource.ORIGIN,
    FetchMode.ORIGIN_ONLY: None,
}


def _log_decision(name: str, policy: TraversalPolicy, result: object, context: str = "") -> None:
    if logger.isEnabledFor(logging.DEBUG):
        suffix = f" {context}" if context else ""
        logger.debug(f"{name}={result} policy={get_short_form(policy)}{suffix}")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def elapsed_hours(since: datetime, now: datetime | None = None) -> int:
    """Whole hours between `since` and `now`, truncated toward zero."""
    now = _as_utc(now or datetime.now(timezone.utc))
    return int((now - _as_utc(since)).total_seconds() / SECONDS_PER_HOUR)


def should_process(
    policy: TraversalPolicy,
    request: Request,
    version: int | None = None,
    now: datetime | None = None,
) -> bool:
    """
    Decide whether fetched content needs (re)processing.

    Args:
        policy: Policy attached to the resource
        request: Fetched resource
        version: Current processing version, for version freshness
        now: Reference time for day-based freshness (defaults to UTC now)

    Returns:
        True if the resource should be processed

    Raises:
        ConfigurationError: If the policy freshness is not recognized
    """
    freshness = policy.freshness
    metadata = request.metadata

    if freshness == Freshness.ALWAYS:
        result = True
    elif freshness == Freshness.MATCH:
        # New or never seen unless it came back from the cache
        result = request.origin != ContentOrigin.CACHE_OF_ORIGIN
    elif isinstance(freshness, AfterDays):
        if metadata.processed_at is None:
            result = True
        else:
            hours = elapsed_hours(metadata.processed_at, now)
            result = hours > freshness.days * HOURS_PER_DAY
    elif freshness in (Freshness.VERSION, Freshness.MATCH_OR_VERSION):
        stored = metadata.version
        result = stored is None or (version is not None and stored < version)
    else:
        raise ConfigurationError(
            "Invalid freshness in traversal policy",
            field="freshness",
            value=freshness,
        )

    origin = getattr(request.origin, "value", request.origin)
    _log_decision(
        "should_process", policy, result,
        f"freshness={policy.to_dict()['freshness']} origin={origin} url={request.url}",
    )
    return result


def should_traverse(policy: TraversalPolicy, request: Request | None = None) -> bool:
    """
    Decide whether to traverse a resource to discover further resources.

    Independent of whether the resource itself needs processing.
    """
    result = policy.transitivity != Transitivity.SHALLOW
    _log_decision("should_traverse", policy, result)
    return result


def should_fetch_existing(policy: TraversalPolicy, request: Request | None = None) -> bool:
    """
    Decide whether to materialize a stored copy already known to match.

    Under match freshness the match is already established, so the stored
    body is only worth fetching when deep traversal needs its links.
    """
    result = (
        policy.freshness != Freshness.MATCH
        and policy.transitivity != Transitivity.SHALLOW
    )
    _log_decision("should_fetch_existing", policy, result)
    return result


def _lookup_source(table: dict, policy: TraversalPolicy) -> FetchSource | None:
    try:
        return table[policy.fetch]
    except (KeyError, TypeError):
        raise ConfigurationError(
            f"Fetch policy misconfigured {policy.fetch}",
            field="fetch",
            value=policy.fetch,
        ) from None


def initial_fetch(policy: TraversalPolicy) -> FetchSource:
    """Source for the first fetch attempt."""
    source = _lookup_source(INITIAL_SOURCES, policy)
    _log_decision("initial_fetch", policy, source.value)
    return source


def missing_fetch(policy: TraversalPolicy) -> FetchSource | None:
    """Fallback source when the initial fetch found nothing, None to give up."""
    source = _lookup_source(MISSING_SOURCES, policy)
    _log_decision("missing_fetch", policy, source.value if source else None)
    return source


def fetch_sources(policy: TraversalPolicy) -> tuple[FetchSource, FetchSource | None]:
    """Return the (initial, missing) source pair for a fetcher."""
    return initial_fetch(policy), missing_fetch(policy)
