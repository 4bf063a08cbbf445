"""
Lightweight in-memory counters for traversal decisions.
"""

import threading
from collections import defaultdict

from crawl_policy.utils.logging import get_logger

logger = get_logger(__name__)


class Metrics:
    """
    Thread-safe named counters.

    A process-wide instance is available through Metrics.get().

    Example:
        >>> metrics = Metrics.get()
        >>> metrics.increment("resources_queued", 3)
        3
        >>> metrics.snapshot()
        {'resources_queued': 3}
    """

    _instance: "Metrics | None" = None

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    @classmethod
    def get(cls) -> "Metrics":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Clear the process-wide counters."""
        if cls._instance is not None:
            with cls._instance._lock:
                cls._instance._counters.clear()

    def increment(self, name: str, value: int = 1) -> int:
        """Add `value` to a counter and return the new total."""
        with self._lock:
            self._counters[name] += value
            return self._counters[name]

    def get_counter(self, name: str) -> int:
        with self._lock:
            return self._counters.get(name, 0)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def summary(self) -> str:
        """Human-readable listing of all counters."""
        lines = ["=== Metrics Summary ==="]
        for name, value in sorted(self.snapshot().items()):
            lines.append(f"  {name}: {value:,}")
        return "\n".join(lines)

    def log_summary(self) -> None:
        logger.info(self.summary())
