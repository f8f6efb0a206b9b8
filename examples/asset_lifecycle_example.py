"""
Example: Lifecycle of a single role-governed asset.

Walks one asset through creation, subscription, distribution from the
reserve, freezing, role handover and opt-out, printing balances and the
event trail along the way. Runs the same freeze sequence under the default
policy and under STRICT_POLICY to show where they differ.
"""

from asset_ledger import (
    AccountId, Asset, CallContext, EventLog, AssetError, STRICT_POLICY,
)


CREATOR = AccountId.from_seed("creator")
RESERVE = AccountId.from_seed("reserve")
FREEZER = AccountId.from_seed("compliance")
ALICE = AccountId.from_seed("alice")
BOB = AccountId.from_seed("bob")


def create(policy=None, verbose=True):
    kwargs = {} if policy is None else {"policy": policy}
    return Asset.new(
        CallContext(CREATOR, asset_id=AccountId.from_seed("asset:GLD")),
        name="Gold",
        unit_label="GLD",
        total_supply=1_000_000,
        decimals=2,
        default_frozen=True,
        url="https://example.org/gld",
        metadata_hash=b"gld1",
        manager=CREATOR,
        reserve=RESERVE,
        freeze=FREEZER,
        sink=EventLog(),
        verbose=verbose,
        test_mode=True,
        **kwargs,
    )


def print_balances(asset, *accounts):
    for name, account in accounts:
        state = asset.account_state(account)
        print(f"  {name:<8} balance={state.balance:>9,}  "
              f"opted_in={state.opted_in!s:<5}  frozen={state.frozen}")


def main():
    print("=" * 80)
    print("ASSET LIFECYCLE - Gold (GLD)")
    print("=" * 80)
    print()

    asset = create()
    accounts = (("reserve", RESERVE), ("alice", ALICE), ("bob", BOB))

    print()
    print("Step 1: Seed the reserve")
    print("-" * 80)
    print("There is no mint path; total_supply is recorded but never credited.")
    print(f"  supply check before seeding: {asset.verify_supply()}")
    asset.set_balance(RESERVE, 1_000_000)
    print(f"  supply check after seeding:  {asset.verify_supply()}")

    print()
    print("Step 2: Holders opt in and receive distributions")
    print("-" * 80)
    asset.opt_in(CallContext(ALICE))
    asset.opt_in(CallContext(BOB))
    asset.transfer(CallContext(RESERVE), ALICE, 250_000)
    asset.transfer(CallContext(RESERVE), BOB, 100_000)
    asset.transfer(CallContext(ALICE), BOB, 50_000)
    print_balances(asset, *accounts)

    print()
    print("Step 3: Compliance freezes bob")
    print("-" * 80)
    asset.freeze(CallContext(FREEZER), BOB, True)
    try:
        asset.freeze(CallContext(FREEZER), BOB, False)
    except AssetError as exc:
        print(f"  unfreeze refused: {type(exc).__name__}")
    print("  Under the default policy a frozen account can still transfer:")
    asset.transfer(CallContext(BOB), ALICE, 10_000)
    print_balances(asset, *accounts)

    print()
    print("Step 4: Manager hands the freeze authority to alice")
    print("-" * 80)
    asset.modify_asset(CallContext(CREATOR), manager=CREATOR, reserve=RESERVE, freeze=ALICE)
    print(f"  roles: {asset.roles}")

    print()
    print("Step 5: Bob opts out; the balance stays put")
    print("-" * 80)
    asset.opt_out(CallContext(BOB))
    print_balances(asset, *accounts)

    print()
    print("Event trail")
    print("-" * 80)
    for event in asset.sink:
        print(f"  {event.kind:<8} {event}")

    print()
    print("=" * 80)
    print("STRICT_POLICY - the same freeze sequence")
    print("=" * 80)
    strict = create(policy=STRICT_POLICY, verbose=False)
    strict.opt_in(CallContext(ALICE))
    strict.opt_in(CallContext(BOB))
    strict.set_balance(BOB, 1_000)
    strict.freeze(CallContext(FREEZER), BOB, True)
    try:
        strict.transfer(CallContext(BOB), ALICE, 10)
    except AssetError as exc:
        print(f"  transfer from frozen bob refused: {type(exc).__name__}")
    strict.freeze(CallContext(FREEZER), BOB, False)
    strict.transfer(CallContext(BOB), ALICE, 10)
    print_balances(strict, ("alice", ALICE), ("bob", BOB))
    print(f"  events: {[e.kind for e in strict.sink]}")


if __name__ == "__main__":
    main()
