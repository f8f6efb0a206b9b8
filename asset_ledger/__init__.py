"""
asset_ledger - Single-Asset Ledger with Role-Gated Administration

One fungible asset per instance: per-account balances, opt-in and frozen
flags, and four administrative roles (manager, reserve, freeze authority,
clawback authority).

Usage:
    from asset_ledger import Asset, AccountId, CallContext, EventLog

    creator = AccountId.from_seed("creator")
    alice = AccountId.from_seed("alice")
    bob = AccountId.from_seed("bob")

    log = EventLog()
    asset = Asset.new(
        CallContext(creator, asset_id=AccountId.from_seed("GLD")),
        name="Gold", unit_label="GLD", total_supply=1_000_000, decimals=2,
        default_frozen=True, url="https://example.org/gld",
        metadata_hash=b"gld1",
        manager=creator, freeze=creator,
        sink=log, test_mode=True,
    )

    asset.opt_in(CallContext(alice))
    asset.opt_in(CallContext(bob))
    asset.set_balance(alice, 500)          # no mint path; test mode only
    asset.transfer(CallContext(alice), bob, 200)
    asset.freeze(CallContext(creator), bob, True)
"""

# Core types
from .core import (
    AccountId,
    AccountState,
    AssetParameters,
    AssetPolicy,
    AssetView,
    Balance,
    CallContext,
    Roles,
    role_or_zero,
    ZERO_ACCOUNT,
    DEFAULT_POLICY,
    STRICT_POLICY,
    ACCOUNT_ID_SIZE,
    METADATA_HASH_SIZE,
    MAX_BALANCE,
    MAX_DECIMALS,
    # Exceptions
    AssetError,
    NotManagerId,
    NotReserveId,
    NotFreezeId,
    NotClawbackId,
    NotOptedIn,
    AlreadyOptedIn,
    NotFrozen,
    NotFreezable,
    AlreadyFrozen,
    FrozenAccount,
    NotEnoughBalance,
    ZeroAmount,
    BalanceOverflow,
    ReentrantCall,
)

# Events
from .events import (
    AssetEvent,
    Transfer,
    Creation,
    Freeze,
    Modify,
    OptIn,
    OptOut,
    Revoke,
    Destruction,
    EventSink,
    EventLog,
)

# Storage
from .storage import (
    KeyValueStore,
    MemoryStore,
    StorageMapping,
    WriteJournal,
    StoreGuard,
    guard_for,
)

# Registries
from .registries import (
    BalanceLedger,
    SubscriptionRegistry,
    FreezeRegistry,
    RoleRegistry,
)

# Guards
from .rules import (
    validate_amount,
    check_transfer,
    check_opt_in,
    check_opt_out,
    check_freeze,
    check_modify,
    resolve_roles,
)

# Asset
from .asset import Asset

__all__ = [
    # Core
    'AccountId', 'AccountState', 'AssetParameters', 'AssetPolicy', 'AssetView',
    'Balance', 'CallContext', 'Roles', 'role_or_zero',
    'ZERO_ACCOUNT', 'DEFAULT_POLICY', 'STRICT_POLICY',
    'ACCOUNT_ID_SIZE', 'METADATA_HASH_SIZE', 'MAX_BALANCE', 'MAX_DECIMALS',
    # Exceptions
    'AssetError', 'NotManagerId', 'NotReserveId', 'NotFreezeId', 'NotClawbackId',
    'NotOptedIn', 'AlreadyOptedIn', 'NotFrozen', 'NotFreezable', 'AlreadyFrozen',
    'FrozenAccount', 'NotEnoughBalance', 'ZeroAmount', 'BalanceOverflow', 'ReentrantCall',
    # Events
    'AssetEvent', 'Transfer', 'Creation', 'Freeze', 'Modify', 'OptIn', 'OptOut',
    'Revoke', 'Destruction', 'EventSink', 'EventLog',
    # Storage
    'KeyValueStore', 'MemoryStore', 'StorageMapping', 'WriteJournal', 'StoreGuard', 'guard_for',
    # Registries
    'BalanceLedger', 'SubscriptionRegistry', 'FreezeRegistry', 'RoleRegistry',
    # Guards
    'validate_amount', 'check_transfer', 'check_opt_in', 'check_opt_out',
    'check_freeze', 'check_modify', 'resolve_roles',
    # Asset
    'Asset',
]

__version__ = '1.0.0'
