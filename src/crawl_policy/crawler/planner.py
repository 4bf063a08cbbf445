"""
Crawl worker step: apply a resource's policy and queue what it discovered.

A worker pops a QueuedResource, asks fetch_plan() where to get content,
fetches it through its own fetcher, then hands the Request and the
resources found in the document to plan().
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from crawl_policy.crawler.queue import QueuedResource, ResourcePriority, TraversalQueue
from crawl_policy.policy.decisions import (
    fetch_sources,
    should_fetch_existing,
    should_process,
    should_traverse,
)
from crawl_policy.policy.propagation import create_policy_for
from crawl_policy.policy.request import Request
from crawl_policy.policy.values import FetchSource, TraversalPolicy
from crawl_policy.utils.logging import get_logger_with_context
from crawl_policy.utils.metrics import Metrics


@dataclass(frozen=True)
class DiscoveredResource:
    """A resource referenced by the document being handled."""

    url: str
    is_root: bool = False


@dataclass(frozen=True)
class FetchPlan:
    """Where to fetch from, and whether to load a stored copy known to match."""

    initial: FetchSource
    missing: FetchSource | None
    fetch_existing: bool


@dataclass
class TraversalDecision:
    """Outcome of handling one fetched resource."""

    process: bool
    traverse: bool
    queued: list[QueuedResource] = field(default_factory=list)
    pruned: int = 0


class TraversalPlanner:
    """
    Applies traversal policies for a crawl worker.

    Args:
        queue: Queue receiving discovered resources
        processing_version: Current processing version for version freshness
        metrics: Counter sink, defaults to the process-wide instance
    """

    def __init__(
        self,
        queue: TraversalQueue,
        processing_version: int | None = None,
        metrics: Metrics | None = None,
    ) -> None:
        self.queue = queue
        self.processing_version = processing_version
        self.metrics = metrics or Metrics.get()

    @classmethod
    def from_settings(cls, settings) -> "TraversalPlanner":
        return cls(
            queue=TraversalQueue(max_depth=settings.queue.max_depth),
            processing_version=settings.policy.processing_version,
        )

    def fetch_plan(self, policy: TraversalPolicy) -> FetchPlan:
        initial, missing = fetch_sources(policy)
        return FetchPlan(
            initial=initial,
            missing=missing,
            fetch_existing=should_fetch_existing(policy),
        )

    async def plan(
        self,
        entry: QueuedResource,
        request: Request,
        discovered: Iterable[DiscoveredResource] = (),
        now: datetime | None = None,
    ) -> TraversalDecision:
        """
        Decide processing and traversal for a fetched resource.

        Discovered resources are queued when the resource is processed or
        traversed, each under its propagated policy. Resources whose
        propagated policy is absent are pruned.
        """
        log = get_logger_with_context(
            __name__, url=entry.url, policy=entry.short_form)
        policy = entry.policy

        decision = TraversalDecision(
            process=should_process(policy, request, self.processing_version, now),
            traverse=should_traverse(policy, request),
        )
        self.metrics.increment(
            "resources_processed" if decision.process else "resources_skipped")

        if not (decision.process or decision.traverse):
            log.debug("Resource up to date, not traversing")
            return decision

        for resource in discovered:
            child_policy = create_policy_for(policy, resource.is_root)
            if child_policy is None:
                decision.pruned += 1
                continue
            queued = await self.queue.put(
                resource.url,
                child_policy,
                priority=ResourcePriority.ROOT if resource.is_root else ResourcePriority.CHILD,
                depth=entry.depth + 1,
                parent_url=entry.url,
                is_root=resource.is_root,
            )
            if queued is not None:
                decision.queued.append(queued)

        self.metrics.increment("resources_queued", len(decision.queued))
        self.metrics.increment("resources_pruned", decision.pruned)
        log.debug(
            f"process={decision.process} traverse={decision.traverse} "
            f"queued={len(decision.queued)} pruned={decision.pruned}"
        )
        return decision
