"""
Named traversal policy presets.

Scenarios covered by the built-in presets:

- default / events: traverse until something previously seen is reached.
  The event is recorded and related resources are present, though they
  may not be completely up to date.
- refresh: traverse a subgraph ensuring everything is fetched, one level
  deep through roots. Already processed resources are assumed current.
- reprocess: reprocess exactly the resources already stored.
- reprocessAndDiscover: reprocess stored resources and fetch new or
  missing ones discovered along the way.
- reprocessAndUpdate: reprocess anything that is out of date or was
  processed by an older version.
"""

from typing import Any, Callable, Iterator

from crawl_policy.core.exceptions import ConfigurationError, PolicyNotFoundError
from crawl_policy.policy.values import (
    FetchMode,
    Freshness,
    ProcessingDepth,
    TraversalPolicy,
    Transitivity,
    clone,
)
from crawl_policy.utils.logging import get_logger

logger = get_logger(__name__)

PolicyFactory = Callable[[], TraversalPolicy]


def default() -> TraversalPolicy:
    return TraversalPolicy(
        FetchMode.ORIGIN_STORAGE,
        Freshness.MATCH,
        ProcessingDepth.DOCUMENT_AND_RELATED,
        Transitivity.SHALLOW,
    )


def refresh() -> TraversalPolicy:
    return TraversalPolicy(
        FetchMode.ORIGIN_STORAGE,
        Freshness.MATCH,
        ProcessingDepth.DOCUMENT_AND_RELATED,
        Transitivity.DEEP_SHALLOW,
    )


def events() -> TraversalPolicy:
    return default()


def reprocess() -> TraversalPolicy:
    return TraversalPolicy(
        FetchMode.STORAGE_ONLY,
        Freshness.VERSION,
        ProcessingDepth.DOCUMENT_AND_RELATED,
        Transitivity.SHALLOW,
    )


def reprocess_and_discover() -> TraversalPolicy:
    return TraversalPolicy(
        FetchMode.STORAGE_ORIGIN_IF_MISSING,
        Freshness.VERSION,
        ProcessingDepth.DOCUMENT_AND_RELATED,
        Transitivity.DEEP_DEEP,
    )


def reprocess_and_update() -> TraversalPolicy:
    return TraversalPolicy(
        FetchMode.ORIGIN_STORAGE,
        Freshness.MATCH_OR_VERSION,
        ProcessingDepth.DOCUMENT_AND_RELATED,
        Transitivity.DEEP_DEEP,
    )


PRESETS: dict[str, PolicyFactory] = {
    "default": default,
    "refresh": refresh,
    "events": events,
    "reprocess": reprocess,
    "reprocessAndDiscover": reprocess_and_discover,
    "reprocessAndUpdate": reprocess_and_update,
}


class PolicyCatalog:
    """
    Registry mapping policy names to factories.

    Every lookup builds a fresh policy, so callers never share an
    instance they did not create.

    Example:
        >>> catalog = PolicyCatalog()
        >>> catalog.get("refresh").transitivity
        <Transitivity.DEEP_SHALLOW: 'deepShallow'>
        >>> catalog.get("nope") is None
        True
    """

    def __init__(self, include_presets: bool = True) -> None:
        self._factories: dict[str, PolicyFactory] = (
            dict(PRESETS) if include_presets else {}
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "PolicyCatalog":
        """
        Build a catalog with the presets plus custom definitions.

        Args:
            settings: Settings or PolicySettings instance

        Raises:
            ConfigurationError: If a custom definition is invalid
        """
        policy_settings = getattr(settings, "policy", settings)
        catalog = cls()
        for name, definition in policy_settings.custom.items():
            catalog.register_definition(name, definition.model_dump())
        return catalog

    def register(self, name: str, factory: PolicyFactory) -> None:
        """Register (or replace) a named factory."""
        if name in self._factories:
            logger.debug(f"Replacing traversal policy '{name}'")
        self._factories[name] = factory

    def register_definition(self, name: str, definition: dict[str, Any]) -> TraversalPolicy:
        """
        Register a policy described by a field mapping.

        The definition is validated immediately.

        Returns:
            The validated policy
        """
        try:
            policy = TraversalPolicy.from_dict(definition)
        except ConfigurationError as e:
            e.details["policy"] = name
            raise
        self.register(name, lambda: clone(policy))
        return policy

    def get(self, name: str) -> TraversalPolicy | None:
        """Return a new policy for `name`, or None if it is unknown."""
        factory = self._factories.get(name)
        return factory() if factory else None

    def require(self, name: str) -> TraversalPolicy:
        """
        Return a new policy for `name`.

        Raises:
            PolicyNotFoundError: If the name is not registered
        """
        policy = self.get(name)
        if policy is None:
            raise PolicyNotFoundError(f"Unknown traversal policy '{name}'", name=name)
        return policy

    def names(self) -> list[str]:
        return list(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[tuple[str, TraversalPolicy]]:
        for name, factory in self._factories.items():
            yield name, factory()

    def __len__(self) -> int:
        return len(self._factories)


_default_catalog = PolicyCatalog()


def get_policy(name: str) -> TraversalPolicy | None:
    """
    Look up a built-in preset by name.

    Unknown names yield None rather than an error.
    """
    return _default_catalog.get(name)
