"""
helpers.py - Shared accounts and builders for asset ledger tests
"""

from typing import Dict, Iterable

from asset_ledger import (
    AccountId, AccountState, Asset, AssetPolicy, CallContext, EventLog,
    DEFAULT_POLICY,
)


# =============================================================================
# ACCOUNTS
# =============================================================================

CREATOR = AccountId.from_seed("creator")
MANAGER = AccountId.from_seed("manager")
RESERVE = AccountId.from_seed("reserve")
FREEZER = AccountId.from_seed("freezer")
CLAWBACK = AccountId.from_seed("clawback")
ALICE = AccountId.from_seed("alice")
BOB = AccountId.from_seed("bob")
CAROL = AccountId.from_seed("carol")
ASSET_ID = AccountId.from_seed("asset:GLD")


def ctx(account: AccountId) -> CallContext:
    """Call context for `account`."""
    return CallContext(account)


# =============================================================================
# BUILDERS
# =============================================================================

def create_asset(
    default_frozen: bool = True,
    total_supply: int = 1_000_000,
    policy: AssetPolicy = DEFAULT_POLICY,
    sink=None,
    with_roles: bool = True,
    **roles,
) -> Asset:
    """Create a test asset; by default MANAGER/RESERVE/FREEZER/CLAWBACK hold the roles."""
    role_kwargs = {}
    if with_roles:
        role_kwargs = dict(manager=MANAGER, reserve=RESERVE, freeze=FREEZER, clawback=CLAWBACK)
    role_kwargs.update(roles)
    return Asset.new(
        CallContext(CREATOR, asset_id=ASSET_ID),
        name="Gold",
        unit_label="GLD",
        total_supply=total_supply,
        decimals=2,
        default_frozen=default_frozen,
        url="https://example.org/gld",
        metadata_hash=b"gld1",
        policy=policy,
        sink=sink if sink is not None else EventLog(),
        verbose=False,
        test_mode=True,
        **role_kwargs,
    )


def snapshot(asset: Asset, accounts: Iterable[AccountId]) -> Dict[AccountId, AccountState]:
    """Capture the per-account state of several accounts."""
    return {a: asset.account_state(a) for a in accounts}
