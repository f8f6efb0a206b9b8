"""
Conservation Law Conformance Tests

INVARIANT: For every sequence of operations on one asset:
    Σ_{a ∈ accounts} balance(a) = constant

Transfers redistribute balance but never create or destroy it. Opt-in,
opt-out, freeze and modify_asset never touch balances at all.

These tests use property-based testing to verify conservation
holds for arbitrary operation sequences, valid or not.
"""

from hypothesis import given, settings, note
from hypothesis import strategies as st

from asset_ledger import AssetError, STRICT_POLICY, DEFAULT_POLICY

from tests.helpers import ALICE, BOB, CAROL, FREEZER, MANAGER, create_asset, ctx


ACCOUNTS = [ALICE, BOB, CAROL, FREEZER, MANAGER]


# =============================================================================
# STRATEGIES FOR PROPERTY-BASED TESTING
# =============================================================================

account = st.sampled_from(ACCOUNTS)

transfer_op = st.tuples(st.just("transfer"), account, account, st.integers(0, 1500))
opt_in_op = st.tuples(st.just("opt_in"), account)
opt_out_op = st.tuples(st.just("opt_out"), account)
freeze_op = st.tuples(st.just("freeze"), account, account, st.booleans())
modify_op = st.tuples(st.just("modify"), account, st.one_of(st.none(), account))

operation = st.one_of(transfer_op, opt_in_op, opt_out_op, freeze_op, modify_op)


def apply(asset, op):
    """Apply one generated operation, ignoring domain rejections."""
    kind = op[0]
    try:
        if kind == "transfer":
            _, sender, receiver, amount = op
            asset.transfer(ctx(sender), receiver, amount)
        elif kind == "opt_in":
            asset.opt_in(ctx(op[1]))
        elif kind == "opt_out":
            asset.opt_out(ctx(op[1]))
        elif kind == "freeze":
            _, caller, target, flag = op
            asset.freeze(ctx(caller), target, flag)
        elif kind == "modify":
            _, caller, new_freeze = op
            asset.modify_asset(ctx(caller), manager=caller, freeze=new_freeze)
    except AssetError as exc:
        note(f"{kind} rejected: {type(exc).__name__}")
        return False
    return True


def seeded_asset(policy):
    asset = create_asset(policy=policy)
    for a in (ALICE, BOB, CAROL):
        asset.opt_in(ctx(a))
    asset.set_balance(ALICE, 1000)
    asset.set_balance(BOB, 500)
    asset.set_balance(CAROL, 250)
    return asset


# =============================================================================
# PROPERTIES
# =============================================================================

class TestConservationProperties:
    """Property-based conservation tests."""

    @given(st.lists(operation, max_size=40))
    @settings(max_examples=100, deadline=None)
    def test_total_balance_constant(self, ops):
        """
        PROPERTY: Circulating supply never changes, whatever the operations.
        """
        asset = seeded_asset(DEFAULT_POLICY)
        initial = asset.circulating_supply()
        for op in ops:
            apply(asset, op)
            assert asset.circulating_supply() == initial

    @given(st.lists(operation, max_size=40))
    @settings(max_examples=100, deadline=None)
    def test_total_balance_constant_strict(self, ops):
        """
        PROPERTY: Conservation also holds with every policy fix switched on.
        """
        asset = seeded_asset(STRICT_POLICY)
        initial = asset.circulating_supply()
        for op in ops:
            apply(asset, op)
        assert asset.circulating_supply() == initial

    @given(st.lists(operation, max_size=40))
    @settings(max_examples=100, deadline=None)
    def test_balances_never_negative(self, ops):
        """
        PROPERTY: No balance ever drops below zero.
        """
        asset = seeded_asset(DEFAULT_POLICY)
        for op in ops:
            apply(asset, op)
            assert all(asset.balance_of(a) >= 0 for a in ACCOUNTS)

    @given(account, account, st.integers(0, 1000))
    @settings(max_examples=100, deadline=None)
    def test_successful_transfer_moves_exact_amount(self, sender, receiver, amount):
        """
        PROPERTY: A successful transfer debits and credits exactly `amount`
        (a self-transfer leaves the balance unchanged).
        """
        asset = seeded_asset(DEFAULT_POLICY)
        before_sender = asset.balance_of(sender)
        before_receiver = asset.balance_of(receiver)

        if not apply(asset, ("transfer", sender, receiver, amount)):
            return

        if sender == receiver:
            assert asset.balance_of(sender) == before_sender
        else:
            assert asset.balance_of(sender) == before_sender - amount
            assert asset.balance_of(receiver) == before_receiver + amount


class TestNonTransferOperations:
    """Operations other than transfer never touch balances."""

    def test_admin_operations_leave_balances(self, funded_asset):
        before = {a: funded_asset.balance_of(a) for a in ACCOUNTS}

        funded_asset.opt_out(ctx(ALICE))
        funded_asset.freeze(ctx(FREEZER), BOB, True)
        funded_asset.modify_asset(ctx(MANAGER), manager=ALICE)

        assert {a: funded_asset.balance_of(a) for a in ACCOUNTS} == before
