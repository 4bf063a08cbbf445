"""
Event feed deduplication.

Walks a paginated, most-recent-first event feed and returns the events
the store has not seen yet. Paging stops at the first page containing a
seen event; unseen events later in that same page are still returned.
"""

from typing import Any, Mapping, Protocol, Sequence

from crawl_policy.core.exceptions import EventFeedError
from crawl_policy.utils.logging import get_logger
from crawl_policy.utils.metrics import Metrics

logger = get_logger(__name__)

Event = Mapping[str, Any]


class EventRequestor(Protocol):
    """Returns the next page of events on each call, empty or None when done."""

    async def get_all(self, url: str) -> Sequence[Event] | None: ...


class EventStore(Protocol):
    """Looks up the stored etag for a document, None if not stored."""

    async def etag(self, document_type: str, url: str) -> str | None: ...


class EventFinder:
    """
    Finds events not yet recorded in the store.

    Args:
        requestor: Source of event pages
        store: Etag lookup for stored documents
        document_type: Type passed to store.etag
        max_pages: Page limit, None to read until a seen event or the end

    Example:
        >>> finder = EventFinder(requestor, store)
        >>> new_events = await finder.get_new_events("https://api.example.com/events")
    """

    def __init__(
        self,
        requestor: EventRequestor,
        store: EventStore,
        document_type: str = "event",
        max_pages: int | None = None,
    ) -> None:
        self.requestor = requestor
        self.store = store
        self.document_type = document_type
        self.max_pages = max_pages

    @classmethod
    def from_settings(cls, requestor: EventRequestor, store: EventStore, settings) -> "EventFinder":
        return cls(
            requestor,
            store,
            document_type=settings.events.document_type,
            max_pages=settings.events.max_pages,
        )

    async def get_new_events(self, url: str) -> list[Event]:
        """
        Collect unseen events from the feed at `url`.

        Raises:
            EventFeedError: If the requestor or store fails
        """
        found: list[Event] = []
        pages = 0

        while self.max_pages is None or pages < self.max_pages:
            page = await self._next_page(url)
            if not page:
                break
            pages += 1

            unseen = [event for event in page if not await self.is_seen(event)]
            found.extend(unseen)
            logger.debug(
                f"Event page {pages}: {len(unseen)}/{len(page)} new ({url})")

            if len(unseen) < len(page):
                break

        Metrics.get().increment("events_found", len(found))
        logger.info(f"Found {len(found)} new event(s) in {pages} page(s): {url}")
        return found

    async def is_seen(self, event: Event) -> bool:
        """
        An event is seen when the store holds an etag for its URL that
        matches the event's own etag, if it carries one.
        """
        event_url = event.get("url")
        if not event_url:
            raise EventFeedError("Event has no url", details={"event": dict(event)})
        try:
            stored = await self.store.etag(self.document_type, event_url)
        except EventFeedError:
            raise
        except Exception as e:
            raise EventFeedError(f"Etag lookup failed: {e}", url=event_url) from e

        if stored is None:
            return False
        current = event.get("etag")
        return current is None or current == stored

    async def _next_page(self, url: str) -> Sequence[Event] | None:
        try:
            return await self.requestor.get_all(url)
        except EventFeedError:
            raise
        except Exception as e:
            raise EventFeedError(f"Event page request failed: {e}", url=url) from e
