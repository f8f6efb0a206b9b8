"""
Determinism Conformance Tests

INVARIANT: Same initial state + same calls ⟹ same final state + same events.

Two assets driven by the same call sequence must agree on every balance,
flag, role and emitted event. A clone driven independently must agree with
its source.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from tests.conformance.test_conservation import ACCOUNTS, apply, operation, seeded_asset
from tests.helpers import snapshot

from asset_ledger import DEFAULT_POLICY, STRICT_POLICY


def observable(asset):
    return (snapshot(asset, ACCOUNTS), asset.roles, asset.sink.events)


class TestDeterminismProperties:
    """Property-based determinism tests."""

    @given(st.lists(operation, max_size=30), st.sampled_from([DEFAULT_POLICY, STRICT_POLICY]))
    @settings(max_examples=100, deadline=None)
    def test_replay_produces_same_result(self, ops, policy):
        """
        PROPERTY: Replaying a call sequence reproduces state and events exactly.
        """
        first = seeded_asset(policy)
        second = seeded_asset(policy)
        outcomes_first = [apply(first, op) for op in ops]
        outcomes_second = [apply(second, op) for op in ops]

        assert outcomes_first == outcomes_second
        assert observable(first) == observable(second)

    @given(st.lists(operation, max_size=30))
    @settings(max_examples=50, deadline=None)
    def test_clone_replay_matches_source(self, ops):
        """
        PROPERTY: A clone driven by the same calls ends where its source ends.
        """
        source = seeded_asset(DEFAULT_POLICY)
        copy = source.clone()
        for op in ops:
            apply(source, op)
            apply(copy, op)
        assert observable(source) == observable(copy)

    @given(st.lists(operation, min_size=1, max_size=30))
    @settings(max_examples=50, deadline=None)
    def test_one_event_per_success(self, ops):
        """
        PROPERTY: The event log grows by exactly one per successful call.
        """
        asset = seeded_asset(DEFAULT_POLICY)
        emitted = len(asset.sink)
        succeeded = sum(apply(asset, op) for op in ops)
        assert len(asset.sink) == emitted + succeeded
