"""
Request contract consumed by the decision engine.

The fetcher fills these in; the policy engine only reads them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ContentOrigin(str, Enum):
    """Where the content of a fetch actually came from."""

    ORIGIN = "origin"
    CACHE_OF_ORIGIN = "cacheOfOrigin"
    STORAGE = "storage"


@dataclass(frozen=True)
class DocumentMetadata:
    """Processing metadata recorded with a stored document."""

    processed_at: datetime | None = None
    version: int | None = None


@dataclass(frozen=True)
class Document:
    """A fetched document as seen by the policy engine."""

    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)


@dataclass(frozen=True)
class Request:
    """
    A fetched resource awaiting policy decisions.

    Attributes:
        origin: Source that supplied the content for this fetch
        document: Stored document, None if nothing is stored yet
        url: Resource URL, used for logging only
    """

    origin: ContentOrigin | str
    document: Document | None = None
    url: str | None = None

    @property
    def metadata(self) -> DocumentMetadata:
        return self.document.metadata if self.document else DocumentMetadata()
