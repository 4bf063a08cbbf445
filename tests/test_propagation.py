"""
Tests for policy propagation to roots and children.
"""

import pytest

from crawl_policy.policy import (
    TraversalPolicy,
    Transitivity,
    create_policy_for,
    create_policy_for_child,
    create_policy_for_root,
    get_policy,
)


def make_policy(processing="documentAndRelated", transitivity="shallow") -> TraversalPolicy:
    return TraversalPolicy("storageOriginIfMissing", 4, processing, transitivity)


class TestRootPropagation:
    """Tests for policies handed to root resources."""

    @pytest.mark.parametrize("processing", ["documentOnly", "documentAndChildren"])
    @pytest.mark.parametrize("transitivity", ["shallow", "deepShallow", "deepDeep"])
    def test_roots_not_queued(self, processing, transitivity):
        assert create_policy_for_root(make_policy(processing, transitivity)) is None

    @pytest.mark.parametrize(
        "transitivity, expected",
        [
            ("shallow", Transitivity.SHALLOW),
            ("deepShallow", Transitivity.SHALLOW),
            ("deepDeep", Transitivity.DEEP_SHALLOW),
        ],
    )
    def test_transitivity_drops_a_level(self, transitivity, expected):
        source = make_policy(transitivity=transitivity)
        derived = create_policy_for_root(source)

        assert derived.transitivity is expected
        assert derived.fetch is source.fetch
        assert derived.freshness == source.freshness
        assert derived.processing is source.processing
        assert derived is not source


class TestChildPropagation:
    """Tests for policies handed to non-root children."""

    @pytest.mark.parametrize("transitivity", ["shallow", "deepShallow", "deepDeep"])
    def test_document_only_stops(self, transitivity):
        assert create_policy_for_child(make_policy("documentOnly", transitivity)) is None

    @pytest.mark.parametrize("processing", ["documentAndRelated", "documentAndChildren"])
    @pytest.mark.parametrize(
        "transitivity, expected",
        [
            ("shallow", Transitivity.SHALLOW),
            ("deepShallow", Transitivity.DEEP_SHALLOW),
            ("deepDeep", Transitivity.DEEP_SHALLOW),
        ],
    )
    def test_transitivity_carries(self, processing, transitivity, expected):
        source = make_policy(processing, transitivity)
        derived = create_policy_for_child(source)

        assert derived.transitivity is expected
        assert derived.fetch is source.fetch
        assert derived.freshness == source.freshness
        assert derived.processing is source.processing


class TestPropagationChains:
    """Tests for multi-level propagation."""

    def test_deep_deep_through_roots(self):
        """Roots go deepDeep -> deepShallow -> shallow and stay there."""
        policy = get_policy("reprocessAndDiscover")
        levels = []
        for _ in range(4):
            policy = create_policy_for_root(policy)
            levels.append(policy.transitivity)

        assert levels == [
            Transitivity.DEEP_SHALLOW,
            Transitivity.SHALLOW,
            Transitivity.SHALLOW,
            Transitivity.SHALLOW,
        ]

    def test_dispatch(self):
        policy = get_policy("reprocessAndUpdate")

        assert create_policy_for(policy, is_root=True) == create_policy_for_root(policy)
        assert create_policy_for(policy, is_root=False) == create_policy_for_child(policy)

    def test_source_unchanged(self):
        """Propagation never mutates the source policy."""
        policy = get_policy("refresh")
        create_policy_for_root(policy)
        create_policy_for_child(policy)

        assert policy == get_policy("refresh")
