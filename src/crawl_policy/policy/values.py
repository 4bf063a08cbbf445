"""
Traversal policy value object and its field enumerations.

A TraversalPolicy combines four independent settings:

Fetch -- where content comes from.
    storageOnly             Only use stored content. Skip the resource if it is not stored.
    originStorage           Use stored content if it is up to date, otherwise go to the origin.
    storageOriginIfMissing  Use stored content. If missing, get it from the origin.
    originOnly              Always get content from the origin.

Freshness -- whether fetched content needs (re)processing.
    always          Process no matter what.
    match           Process if the origin and stored documents do NOT match.
    N (days)        Process if the stored copy was processed more than N days ago.
    version         Process if the stored processing version is behind the current one.
    matchOrVersion  Process on mismatch or when the stored version is out of date.

Processing -- how far discovery propagates.
    documentAndRelated   Queue every referenced resource.
    documentAndChildren  Queue referenced children only, never roots.
    documentOnly         Do not queue any referenced resources.

Transitivity -- how deep traversal continues.
    shallow      Queue related resources with the current freshness.
    deepShallow  Queue non-roots as deep and roots as shallow.
    deepDeep     Queue everything deep; roots drop to deepShallow.
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Union

from crawl_policy.core.exceptions import ConfigurationError


class FetchMode(str, Enum):
    """Content source selection."""

    STORAGE_ONLY = "storageOnly"
    ORIGIN_STORAGE = "originStorage"
    STORAGE_ORIGIN_IF_MISSING = "storageOriginIfMissing"
    ORIGIN_ONLY = "originOnly"


class Freshness(str, Enum):
    """Symbolic freshness rules. The numeric rule is AfterDays."""

    ALWAYS = "always"
    MATCH = "match"
    VERSION = "version"
    MATCH_OR_VERSION = "matchOrVersion"


class ProcessingDepth(str, Enum):
    """How far discovery propagates from a resource."""

    DOCUMENT_AND_RELATED = "documentAndRelated"
    DOCUMENT_AND_CHILDREN = "documentAndChildren"
    DOCUMENT_ONLY = "documentOnly"


class Transitivity(str, Enum):
    """How deep traversal continues through referenced resources."""

    SHALLOW = "shallow"
    DEEP_SHALLOW = "deepShallow"
    DEEP_DEEP = "deepDeep"


class FetchSource(str, Enum):
    """Where a fetcher should look for content."""

    STORAGE = "storage"
    ORIGIN = "origin"


@dataclass(frozen=True)
class AfterDays:
    """Numeric freshness: reprocess once the stored copy is older than `days`."""

    days: float

    def __post_init__(self) -> None:
        if not _is_day_count(self.days):
            raise ConfigurationError(
                "Freshness days must be a non-negative number",
                field="freshness",
                value=self.days,
            )

    def __str__(self) -> str:
        return str(self.days)


FreshnessRule = Union[Freshness, AfterDays]


def _is_day_count(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and value >= 0


def _coerce(enum_type: type[Enum], field_name: str, value: Any) -> Enum:
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Invalid {field_name} in traversal policy, expected one of: {allowed}",
            field=field_name,
            value=value,
        ) from None


def coerce_freshness(value: Any) -> FreshnessRule:
    """
    Normalize a freshness setting.

    Accepts a Freshness member, its string value, an AfterDays, or a
    non-negative number of days.

    Raises:
        ConfigurationError: If the value is none of these
    """
    if isinstance(value, AfterDays):
        return value
    if _is_day_count(value):
        return AfterDays(value)
    if isinstance(value, str):
        return _coerce(Freshness, "freshness", value)
    raise ConfigurationError(
        "Invalid freshness in traversal policy",
        field="freshness",
        value=value,
    )


@dataclass(frozen=True)
class TraversalPolicy:
    """
    Immutable traversal policy.

    Fields accept either enum members or their string values; anything
    else raises ConfigurationError at construction time.

    Example:
        >>> policy = TraversalPolicy("originStorage", "match", "documentAndRelated", "shallow")
        >>> policy.transitivity
        <Transitivity.SHALLOW: 'shallow'>
    """

    fetch: FetchMode
    freshness: FreshnessRule
    processing: ProcessingDepth
    transitivity: Transitivity

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "fetch", _coerce(
            FetchMode, "fetch", self.fetch))
        object.__setattr__(self, "freshness", coerce_freshness(self.freshness))
        object.__setattr__(self, "processing", _coerce(
            ProcessingDepth, "processing", self.processing))
        object.__setattr__(self, "transitivity", _coerce(
            Transitivity, "transitivity", self.transitivity))

    def clone(self) -> "TraversalPolicy":
        """Return an equal policy with its own identity."""
        return TraversalPolicy(
            self.fetch, self.freshness, self.processing, self.transitivity)

    def with_transitivity(self, transitivity: Transitivity | str) -> "TraversalPolicy":
        """Return a copy with only the transitivity replaced."""
        return TraversalPolicy(
            self.fetch, self.freshness, self.processing, transitivity)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary of configuration values."""
        if isinstance(self.freshness, AfterDays):
            freshness: Any = self.freshness.days
        else:
            freshness = self.freshness.value
        return {
            "fetch": self.fetch.value,
            "freshness": freshness,
            "processing": self.processing.value,
            "transitivity": self.transitivity.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TraversalPolicy":
        """
        Build a policy from a mapping with the four field names.

        Raises:
            ConfigurationError: If a field is missing or invalid
        """
        missing = [
            name for name in ("fetch", "freshness", "processing", "transitivity")
            if name not in data
        ]
        if missing:
            raise ConfigurationError(
                "Traversal policy definition is incomplete",
                details={"missing": missing},
            )
        return cls(
            fetch=data["fetch"],
            freshness=data["freshness"],
            processing=data["processing"],
            transitivity=data["transitivity"],
        )


def clone(policy: TraversalPolicy) -> TraversalPolicy:
    """Return an independent copy of `policy`."""
    return policy.clone()
