"""
Policy propagation to resources discovered during traversal.

Once traversal is deep it carries through to children, while roots get
one level less. A deepDeep traversal queues roots as deepShallow and a
deepShallow traversal queues them as shallow, which lets a crawl push
deep for exactly one level through roots.
"""

from crawl_policy.policy.values import ProcessingDepth, TraversalPolicy, Transitivity

ROOT_TRANSITIVITY = {
    Transitivity.SHALLOW: Transitivity.SHALLOW,
    Transitivity.DEEP_SHALLOW: Transitivity.SHALLOW,
    Transitivity.DEEP_DEEP: Transitivity.DEEP_SHALLOW,
}

CHILD_TRANSITIVITY = {
    Transitivity.SHALLOW: Transitivity.SHALLOW,
    Transitivity.DEEP_SHALLOW: Transitivity.DEEP_SHALLOW,
    Transitivity.DEEP_DEEP: Transitivity.DEEP_SHALLOW,
}


def create_policy_for_root(policy: TraversalPolicy) -> TraversalPolicy | None:
    """
    Policy for a root resource reached from `policy`'s resource.

    Returns None when roots are not queued at all.
    """
    if policy.processing in (
        ProcessingDepth.DOCUMENT_ONLY,
        ProcessingDepth.DOCUMENT_AND_CHILDREN,
    ):
        return None
    return policy.with_transitivity(ROOT_TRANSITIVITY[policy.transitivity])


def create_policy_for_child(policy: TraversalPolicy) -> TraversalPolicy | None:
    """
    Policy for a non-root child reached from `policy`'s resource.

    Returns None when no further discovery happens.
    """
    if policy.processing == ProcessingDepth.DOCUMENT_ONLY:
        return None
    return policy.with_transitivity(CHILD_TRANSITIVITY[policy.transitivity])


def create_policy_for(policy: TraversalPolicy, is_root: bool) -> TraversalPolicy | None:
    if is_root:
        return create_policy_for_root(policy)
    return create_policy_for_child(policy)
