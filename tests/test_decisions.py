"""
Tests for fetch, process and traverse decisions.
"""

import logging
from datetime import timedelta

import pytest

from crawl_policy.core.exceptions import ConfigurationError
from crawl_policy.policy import (
    ContentOrigin,
    FetchSource,
    Request,
    TraversalPolicy,
    fetch_sources,
    get_policy,
    initial_fetch,
    missing_fetch,
    should_fetch_existing,
    should_process,
    should_traverse,
)


def make_policy(
    fetch="originStorage",
    freshness="match",
    processing="documentAndRelated",
    transitivity="shallow",
) -> TraversalPolicy:
    return TraversalPolicy(fetch, freshness, processing, transitivity)


class TestShouldProcess:
    """Tests for freshness-driven processing decisions."""

    @pytest.mark.parametrize("origin", list(ContentOrigin))
    def test_always(self, make_request, origin):
        """Always freshness processes regardless of origin or metadata."""
        request = make_request(origin=origin, version=99)

        assert should_process(make_policy(freshness="always"), request, 1) is True

    def test_match_new_content(self, make_request):
        """Content from the origin is new and gets processed."""
        request = make_request(origin=ContentOrigin.ORIGIN)

        assert should_process(make_policy(), request) is True

    def test_match_cache_hit(self, make_request):
        """Content served from the cache of the origin is skipped."""
        request = make_request(origin=ContentOrigin.CACHE_OF_ORIGIN)

        assert should_process(make_policy(), request) is False

    def test_match_accepts_plain_strings(self, make_request):
        """Origins given as strings compare like the enum."""
        assert should_process(make_policy(), make_request(origin="cacheOfOrigin")) is False
        assert should_process(make_policy(), make_request(origin="origin")) is True

    def test_days_older_than_threshold(self, make_request, now):
        """Documents processed more than N days ago get reprocessed."""
        request = make_request(processed_at=now - timedelta(days=3, hours=1))

        assert should_process(make_policy(freshness=3), request, now=now) is True

    def test_days_exactly_threshold(self, make_request, now):
        """Exactly N days is not strictly older."""
        request = make_request(processed_at=now - timedelta(days=3))

        assert should_process(make_policy(freshness=3), request, now=now) is False

    def test_days_partial_hour_truncated(self, make_request, now):
        """Elapsed time is counted in whole hours."""
        request = make_request(processed_at=now - timedelta(hours=72, minutes=59))

        assert should_process(make_policy(freshness=3), request, now=now) is False

    def test_days_recent(self, make_request, now):
        request = make_request(processed_at=now - timedelta(hours=5))

        assert should_process(make_policy(freshness=1), request, now=now) is False

    def test_days_zero_threshold(self, make_request, now):
        """A zero-day threshold reprocesses anything at least an hour old."""
        request = make_request(processed_at=now - timedelta(hours=1))

        assert should_process(make_policy(freshness=0), request, now=now) is True

    def test_days_naive_timestamp(self, make_request, now):
        """Naive timestamps are treated as UTC."""
        processed = (now - timedelta(days=10)).replace(tzinfo=None)
        request = make_request(processed_at=processed)

        assert should_process(make_policy(freshness=2), request, now=now) is True

    def test_days_never_processed(self, make_request, now):
        """No processed_at means never processed."""
        assert should_process(make_policy(freshness=2), make_request(), now=now) is True

    @pytest.mark.parametrize("freshness", ["version", "matchOrVersion"])
    @pytest.mark.parametrize(
        "stored, current, expected",
        [
            (None, 2, True),
            (1, 2, True),
            (2, 2, False),
            (3, 2, False),
            (0, 1, True),
            (0, 0, False),
        ],
    )
    def test_version(self, make_request, freshness, stored, current, expected):
        """Process when the stored version is absent or behind."""
        request = make_request(version=stored)

        assert should_process(make_policy(freshness=freshness), request, current) is expected

    def test_version_without_document(self):
        """A request with nothing stored has no version."""
        request = Request(origin=ContentOrigin.ORIGIN)

        assert should_process(make_policy(freshness="version"), request, 1) is True

    def test_version_without_current_version(self, make_request):
        """Without a current version only missing versions are processed."""
        policy = make_policy(freshness="version")

        assert should_process(policy, make_request(version=4)) is False
        assert should_process(policy, make_request(version=None)) is True

    def test_invalid_freshness(self, make_request):
        """A corrupted freshness raises ConfigurationError."""
        policy = make_policy()
        object.__setattr__(policy, "freshness", "sometimes")

        with pytest.raises(ConfigurationError):
            should_process(policy, make_request())


class TestTraversal:
    """Tests for traversal and fetch-existing decisions."""

    @pytest.mark.parametrize(
        "transitivity, expected",
        [("shallow", False), ("deepShallow", True), ("deepDeep", True)],
    )
    @pytest.mark.parametrize("freshness", ["always", "match", 5, "version"])
    @pytest.mark.parametrize("processing", ["documentOnly", "documentAndRelated"])
    def test_should_traverse(self, make_request, transitivity, expected, freshness, processing):
        """Traversal depends on transitivity alone."""
        policy = make_policy(
            freshness=freshness, processing=processing, transitivity=transitivity)

        assert should_traverse(policy, make_request()) is expected

    @pytest.mark.parametrize(
        "freshness, transitivity, expected",
        [
            ("match", "shallow", False),
            ("match", "deepShallow", False),
            ("match", "deepDeep", False),
            ("version", "shallow", False),
            ("version", "deepShallow", True),
            ("version", "deepDeep", True),
            ("always", "shallow", False),
            ("always", "deepShallow", True),
            (7, "deepDeep", True),
        ],
    )
    def test_should_fetch_existing(self, make_request, freshness, transitivity, expected):
        policy = make_policy(freshness=freshness, transitivity=transitivity)

        assert should_fetch_existing(policy, make_request()) is expected


class TestFetchSources:
    """Tests for initial and fallback source selection."""

    @pytest.mark.parametrize(
        "fetch, initial, missing",
        [
            ("storageOnly", FetchSource.STORAGE, None),
            ("originStorage", FetchSource.ORIGIN, FetchSource.ORIGIN),
            ("storageOriginIfMissing", FetchSource.STORAGE, FetchSource.ORIGIN),
            ("originOnly", FetchSource.ORIGIN, None),
        ],
    )
    def test_mapping(self, fetch, initial, missing):
        policy = make_policy(fetch=fetch)

        assert initial_fetch(policy) is initial
        assert missing_fetch(policy) is missing
        assert fetch_sources(policy) == (initial, missing)

    @pytest.mark.parametrize("decide", [initial_fetch, missing_fetch])
    def test_invalid_fetch(self, decide):
        """A corrupted fetch mode raises and names the bad value."""
        policy = get_policy("default")
        object.__setattr__(policy, "fetch", "teleport")

        with pytest.raises(ConfigurationError) as exc_info:
            decide(policy)

        assert "teleport" in str(exc_info.value)


class TestDecisionLogging:
    """Each decision leaves a DEBUG trail tagged with the policy short form."""

    def test_decisions_log_short_form(self, make_request, caplog):
        caplog.set_level(logging.DEBUG, logger="crawl_policy")
        policy = get_policy("refresh")
        request = make_request(origin=ContentOrigin.CACHE_OF_ORIGIN)

        should_process(policy, request)
        should_traverse(policy, request)
        should_fetch_existing(policy, request)
        fetch_sources(policy)

        messages = [
            record.getMessage()
            for record in caplog.records
            if record.name == "crawl_policy.policy.decisions"
        ]
        assert [message.split("=", 1)[0] for message in messages] == [
            "should_process",
            "should_traverse",
            "should_fetch_existing",
            "initial_fetch",
            "missing_fetch",
        ]
        assert all("policy=oMrd" in message for message in messages)
        assert "should_process=False" in messages[0]
        assert "freshness=match origin=cacheOfOrigin" in messages[0]
        assert "Freshness.MATCH" not in messages[0]
        assert messages[3].startswith("initial_fetch=origin")
