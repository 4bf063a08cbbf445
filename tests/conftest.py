"""
Shared pytest fixtures for crawl policy tests.
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from crawl_policy.config import reset_settings
from crawl_policy.policy import (
    ContentOrigin,
    Document,
    DocumentMetadata,
    Request,
)
from crawl_policy.utils.logging import reset_logging
from crawl_policy.utils.metrics import Metrics


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset cached settings, logging and counters around each test."""
    reset_settings()
    reset_logging()
    Metrics.reset()
    yield
    reset_settings()
    reset_logging()
    Metrics.reset()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for day-based freshness."""
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_request():
    """Build a Request with the given origin and stored metadata."""

    def _make(
        origin: ContentOrigin | str = ContentOrigin.ORIGIN,
        processed_at: datetime | None = None,
        version: int | None = None,
        url: str = "https://example.com/repo",
    ) -> Request:
        metadata = DocumentMetadata(processed_at=processed_at, version=version)
        return Request(origin=origin, document=Document(metadata=metadata), url=url)

    return _make
