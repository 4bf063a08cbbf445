"""
Policy-aware traversal queue.

Each queued resource carries the traversal policy it was discovered
under. Deduplication is keyed on the normalized URL plus the full policy,
so the same resource queued under a different policy is still accepted.
"""

import asyncio
import heapq
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from urllib.parse import urlparse, urlunparse

from crawl_policy.core.exceptions import QueueError
from crawl_policy.policy.short_form import get_short_form
from crawl_policy.policy.values import TraversalPolicy
from crawl_policy.utils.logging import get_logger

logger = get_logger(__name__)


class ResourcePriority(IntEnum):
    """
    Priority levels for the traversal queue.

    Lower values = higher priority (processed first).
    """

    SEED = 0  # Explicitly requested resources
    ROOT = 10  # Roots reached by traversal
    CHILD = 50  # Children reached by traversal
    RETRY = 100  # Failed entries awaiting another attempt


@dataclass(order=True)
class QueuedResource:
    """
    Resource entry in the traversal queue.

    Sortable by priority for the heap.
    """

    priority: int
    url: str = field(compare=False)
    policy: TraversalPolicy = field(compare=False)
    depth: int = field(compare=False, default=0)
    parent_url: str | None = field(compare=False, default=None)
    is_root: bool = field(compare=False, default=False)
    discovered_at: datetime = field(
        compare=False,
        default_factory=lambda: datetime.now(timezone.utc),
    )
    retry_count: int = field(compare=False, default=0)

    @property
    def short_form(self) -> str:
        return get_short_form(self.policy)

    @property
    def key(self) -> tuple[str, TraversalPolicy]:
        """Deduplication key: normalized URL and policy."""
        return (self.url, self.policy)


def normalize_url(url: str) -> str:
    """
    Normalize URL for consistent comparison.

    - Lowercases scheme and host
    - Removes default ports
    - Removes trailing slashes (except root)
    - Removes fragments
    - Sorts query parameters
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return url

    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()

    if netloc.endswith(":80") and scheme == "http":
        netloc = netloc[:-3]
    elif netloc.endswith(":443") and scheme == "https":
        netloc = netloc[:-4]

    path = parsed.path or "/"
    if path != "/" and path.endswith("/"):
        path = path.rstrip("/")

    query = parsed.query
    if query:
        query = "&".join(sorted(query.split("&")))

    return urlunparse((scheme, netloc, path, parsed.params, query, ""))


class TraversalQueue:
    """
    Priority queue of resources to fetch, each with its policy.

    Example:
        >>> queue = TraversalQueue(max_depth=5)
        >>> await queue.put("https://example.com", get_policy("refresh"))
        >>> entry = await queue.get()
        >>> entry.short_form
        'oMrd'
    """

    def __init__(self, max_depth: int = 10) -> None:
        self.max_depth = max_depth
        self._heap: list[QueuedResource] = []
        self._seen: set[tuple[str, TraversalPolicy]] = set()
        self._in_progress: set[tuple[str, TraversalPolicy]] = set()
        self._completed: set[tuple[str, TraversalPolicy]] = set()
        self._failed: dict[tuple[str, TraversalPolicy], int] = {}  # key -> failure count
        self._lock = asyncio.Lock()

    async def put(
        self,
        url: str,
        policy: TraversalPolicy,
        priority: int = ResourcePriority.SEED,
        depth: int = 0,
        parent_url: str | None = None,
        is_root: bool = False,
    ) -> QueuedResource | None:
        """
        Add a resource unless it was already queued under the same policy.

        Returns:
            The queued entry, or None if duplicate or too deep
        """
        entry = QueuedResource(
            priority=priority,
            url=normalize_url(url),
            policy=policy,
            depth=depth,
            parent_url=parent_url,
            is_root=is_root,
        )

        async with self._lock:
            if depth > self.max_depth:
                logger.debug(
                    f"Skipping resource (depth {depth} > {self.max_depth}): {url}")
                return None

            if entry.key in self._seen:
                return None

            heapq.heappush(self._heap, entry)
            self._seen.add(entry.key)

        logger.debug(
            f"Queued {entry.short_form} (priority={priority}, depth={depth}): {url}")
        return entry

    async def get(self) -> QueuedResource | None:
        """
        Pop the highest priority entry and mark it in progress.

        Returns:
            QueuedResource or None if the queue is empty
        """
        async with self._lock:
            while self._heap:
                entry = heapq.heappop(self._heap)
                if entry.key in self._completed:
                    continue
                self._in_progress.add(entry.key)
                return entry
            return None

    async def complete(self, entry: QueuedResource) -> None:
        """Mark an entry as successfully handled."""
        async with self._lock:
            if entry.key not in self._in_progress:
                raise QueueError(
                    "Resource is not in progress",
                    details={"url": entry.url, "policy": entry.short_form},
                )
            self._in_progress.discard(entry.key)
            self._completed.add(entry.key)

    async def fail(self, entry: QueuedResource, max_retries: int = 3) -> bool:
        """
        Mark an in-progress entry as failed, requeuing it with its policy for retry.

        Returns:
            True if requeued, False if max retries exceeded

        Raises:
            QueueError: If the entry is not in progress
        """
        async with self._lock:
            if entry.key not in self._in_progress:
                raise QueueError(
                    "Resource is not in progress",
                    details={"url": entry.url, "policy": entry.short_form},
                )
            self._in_progress.discard(entry.key)
            failure_count = self._failed.get(entry.key, 0) + 1
            self._failed[entry.key] = failure_count

            if failure_count > max_retries:
                logger.warning(
                    f"Max retries exceeded ({failure_count}): {entry.url}")
                return False

            heapq.heappush(self._heap, QueuedResource(
                priority=ResourcePriority.RETRY,
                url=entry.url,
                policy=entry.policy,
                depth=entry.depth,
                parent_url=entry.parent_url,
                is_root=entry.is_root,
                retry_count=failure_count,
            ))
            logger.debug(
                f"Requeued for retry ({failure_count}/{max_retries}): {entry.url}")
            return True

    @property
    def pending_count(self) -> int:
        return len(self._heap)

    @property
    def in_progress_count(self) -> int:
        return len(self._in_progress)

    @property
    def completed_count(self) -> int:
        return len(self._completed)

    def is_empty(self) -> bool:
        """Check if nothing is pending or in progress."""
        return not self._heap and not self._in_progress

    def is_seen(self, url: str, policy: TraversalPolicy) -> bool:
        return (normalize_url(url), policy) in self._seen

    def get_stats(self) -> dict:
        return {
            "pending": self.pending_count,
            "in_progress": self.in_progress_count,
            "completed": self.completed_count,
            "seen": len(self._seen),
            "failed": len(self._failed),
        }

    def clear(self) -> None:
        self._heap.clear()
        self._seen.clear()
        self._in_progress.clear()
        self._completed.clear()
        self._failed.clear()
