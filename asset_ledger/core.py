"""
Core types for the single-asset ledger.

This module provides the foundational data structures and protocols:
1. Identifiers: AccountId and the ZERO_ACCOUNT sentinel
2. Immutable records: AssetParameters, Roles, AccountState, CallContext
3. Configuration: AssetPolicy
4. Protocols: AssetView for read-only access to asset state
5. Exceptions: AssetError and the per-precondition error types

Nothing in this module mutates state.
"""

from __future__ import annotations
from dataclasses import dataclass
import hashlib
from typing import Optional, Protocol, Set, runtime_checkable


# ============================================================================
# CONSTANTS
# ============================================================================

# Width of an account identifier in bytes.
ACCOUNT_ID_SIZE = 32

# Width of the asset metadata hash in bytes.
METADATA_HASH_SIZE = 4

# Balances are unsigned 128-bit quantities.
MAX_BALANCE = 2**128 - 1

# Decimal precision is an unsigned 32-bit quantity.
MAX_DECIMALS = 2**32 - 1


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Quantity of the asset held by one account. Always a non-negative int.
Balance = int


# ============================================================================
# ACCOUNT IDENTIFIERS
# ============================================================================

@dataclass(frozen=True, slots=True, order=True)
class AccountId:
    """
    Opaque 32-byte account identifier.

    Comparable and hashable so it can key storage. The all-zero value
    (ZERO_ACCOUNT) stands for "no account" wherever a role is unassigned.
    """
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError(f"AccountId must be bytes, got {type(self.raw).__name__}")
        if len(self.raw) != ACCOUNT_ID_SIZE:
            raise ValueError(
                f"AccountId must be {ACCOUNT_ID_SIZE} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, 'raw', bytes(self.raw))

    @classmethod
    def from_seed(cls, seed: str) -> AccountId:
        """Derive a deterministic identifier from a human-readable seed (sha256)."""
        return cls(hashlib.sha256(seed.encode()).digest())

    @classmethod
    def from_hex(cls, value: str) -> AccountId:
        return cls(bytes.fromhex(value))

    def hex(self) -> str:
        return self.raw.hex()

    @property
    def is_zero(self) -> bool:
        return not any(self.raw)

    def __repr__(self) -> str:
        if self.is_zero:
            return "AccountId(ZERO)"
        return f"AccountId({self.raw[:4].hex()}…{self.raw[-2:].hex()})"


# Sentinel for "no role holder".
ZERO_ACCOUNT = AccountId(bytes(ACCOUNT_ID_SIZE))


def role_or_zero(account: Optional[AccountId]) -> AccountId:
    """Map an absent role holder to the sentinel identifier."""
    return ZERO_ACCOUNT if account is None else account


# ============================================================================
# EXCEPTIONS
# ============================================================================

class AssetError(Exception):
    """Base exception for all asset ledger errors."""
    pass


class NotManagerId(AssetError):
    """Raised when the caller is not the current manager."""
    pass


class NotReserveId(AssetError):
    """Caller is not the current reserve. No operation currently raises this."""
    pass


class NotFreezeId(AssetError):
    """Raised when the caller is not the current freeze authority."""
    pass


class NotClawbackId(AssetError):
    """Caller is not the current clawback authority. No operation currently raises this."""
    pass


class NotOptedIn(AssetError):
    """Raised when the target or calling account has not opted in to the asset."""
    pass


class AlreadyOptedIn(AssetError):
    """Raised when the caller has already opted in."""
    pass


class NotFrozen(AssetError):
    """Raised when unfreezing an account that is not frozen (AssetPolicy.allow_unfreeze only)."""
    pass


class NotFreezable(AssetError):
    """Raised when freezing an asset that was not created with default_frozen."""
    pass


class AlreadyFrozen(AssetError):
    """Raised when the target account's frozen flag is already set."""
    pass


class FrozenAccount(AssetError):
    """Raised when a frozen account takes part in a transfer (AssetPolicy.enforce_freeze_on_transfer only)."""
    pass


class NotEnoughBalance(AssetError):
    """Raised when the sender's balance is below the requested amount."""
    pass


class ZeroAmount(AssetError):
    """Raised for zero-amount transfers (AssetPolicy.reject_zero_amount only)."""
    pass


class BalanceOverflow(AssetError):
    """Raised when a credit would push a balance past MAX_BALANCE."""
    pass


class ReentrantCall(AssetError):
    """Raised when an operation is invoked while another one on the same asset is running."""
    pass


# ============================================================================
# CALL CONTEXT
# ============================================================================

@dataclass(frozen=True, slots=True)
class CallContext:
    """
    Identity information the host supplies with every call.

    Attributes:
        caller: Authenticated account making the call. Trusted as-is.
        asset_id: Identity of the asset instance. Required at construction,
                  ignored afterwards (the asset keeps the value it was built with).
    """
    caller: AccountId
    asset_id: Optional[AccountId] = None

    def __post_init__(self):
        if not isinstance(self.caller, AccountId):
            raise TypeError(f"caller must be AccountId, got {type(self.caller).__name__}")
        if self.asset_id is not None and not isinstance(self.asset_id, AccountId):
            raise TypeError(f"asset_id must be AccountId, got {type(self.asset_id).__name__}")


# ============================================================================
# ASSET RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class AssetParameters:
    """
    Immutable parameters fixed when the asset is created.

    Attributes:
        asset_id: Identity of this asset instance.
        creator: Account that created the asset.
        name: Human-readable asset name.
        unit_label: Short unit name (e.g. "GLD").
        total_supply: Declared total supply. Recorded only; no balance is seeded from it.
        decimals: Display precision.
        default_frozen: Whether the freeze authority may freeze accounts.
        url: Off-ledger reference for the asset.
        metadata_hash: 4-byte commitment to off-ledger metadata.
    """
    asset_id: AccountId
    creator: AccountId
    name: str
    unit_label: str
    total_supply: Balance
    decimals: int
    default_frozen: bool
    url: str
    metadata_hash: bytes

    def __post_init__(self):
        if not isinstance(self.asset_id, AccountId):
            raise TypeError("asset_id must be AccountId")
        if not isinstance(self.creator, AccountId):
            raise TypeError("creator must be AccountId")
        if not isinstance(self.name, str):
            raise TypeError("name must be str")
        if not isinstance(self.unit_label, str):
            raise TypeError("unit_label must be str")
        if not isinstance(self.url, str):
            raise TypeError("url must be str")
        if not isinstance(self.default_frozen, bool):
            raise TypeError("default_frozen must be bool")
        if isinstance(self.total_supply, bool) or not isinstance(self.total_supply, int):
            raise TypeError("total_supply must be int")
        if not 0 <= self.total_supply <= MAX_BALANCE:
            raise ValueError(f"total_supply out of range: {self.total_supply}")
        if isinstance(self.decimals, bool) or not isinstance(self.decimals, int):
            raise TypeError("decimals must be int")
        if not 0 <= self.decimals <= MAX_DECIMALS:
            raise ValueError(f"decimals out of range: {self.decimals}")
        if not isinstance(self.metadata_hash, (bytes, bytearray)):
            raise TypeError("metadata_hash must be bytes")
        if len(self.metadata_hash) != METADATA_HASH_SIZE:
            raise ValueError(
                f"metadata_hash must be {METADATA_HASH_SIZE} bytes, got {len(self.metadata_hash)}"
            )
        object.__setattr__(self, 'metadata_hash', bytes(self.metadata_hash))


@dataclass(frozen=True, slots=True)
class Roles:
    """
    The four administrative role holders. ZERO_ACCOUNT means unassigned.
    """
    manager: AccountId = ZERO_ACCOUNT
    reserve: AccountId = ZERO_ACCOUNT
    freeze_authority: AccountId = ZERO_ACCOUNT
    clawback_authority: AccountId = ZERO_ACCOUNT

    def __post_init__(self):
        for name in ('manager', 'reserve', 'freeze_authority', 'clawback_authority'):
            if not isinstance(getattr(self, name), AccountId):
                raise TypeError(f"{name} must be AccountId")

    @classmethod
    def from_optional(
        cls,
        manager: Optional[AccountId] = None,
        reserve: Optional[AccountId] = None,
        freeze: Optional[AccountId] = None,
        clawback: Optional[AccountId] = None,
    ) -> Roles:
        """Build a role set where every absent holder becomes ZERO_ACCOUNT."""
        return cls(
            manager=role_or_zero(manager),
            reserve=role_or_zero(reserve),
            freeze_authority=role_or_zero(freeze),
            clawback_authority=role_or_zero(clawback),
        )


@dataclass(frozen=True, slots=True)
class AccountState:
    """Snapshot of one account's three per-account flags/quantities."""
    account: AccountId
    balance: Balance = 0
    opted_in: bool = False
    frozen: bool = False


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass(frozen=True, slots=True)
class AssetPolicy:
    """
    Behavior switches for the places where the original rules have known gaps.

    Every flag defaults to False, which reproduces the original behavior
    exactly. Turning a flag on is an observable behavior change.

    Attributes:
        enforce_freeze_on_transfer: Reject transfers whose sender or receiver is
            frozen with FrozenAccount.
        reject_zero_amount: Reject zero-amount transfers with ZeroAmount.
        allow_unfreeze: Compare the requested freeze value against the current
            flag, so frozen accounts can be unfrozen. Unfreezing an account
            that is not frozen raises NotFrozen.
        absent_role_unchanged: In modify_asset, an omitted role keeps its current
            holder instead of being cleared to ZERO_ACCOUNT.
        emit_creation_event: Emit a Creation event when the asset is created.
    """
    enforce_freeze_on_transfer: bool = False
    reject_zero_amount: bool = False
    allow_unfreeze: bool = False
    absent_role_unchanged: bool = False
    emit_creation_event: bool = False


# Original behavior, gaps included.
DEFAULT_POLICY = AssetPolicy()

# Every fix switched on.
STRICT_POLICY = AssetPolicy(
    enforce_freeze_on_transfer=True,
    reject_zero_amount=True,
    allow_unfreeze=True,
    absent_role_unchanged=True,
    emit_creation_event=True,
)


# ============================================================================
# PROTOCOLS
# ============================================================================

@runtime_checkable
class AssetView(Protocol):
    """
    Read-only interface to asset state.

    The guard functions in rules.py accept an AssetView and never mutate it.
    Asset implements this protocol; tests use FakeView.
    """

    @property
    def params(self) -> AssetParameters:
        """Return the immutable asset parameters."""
        ...

    @property
    def roles(self) -> Roles:
        """Return the current role holders."""
        ...

    @property
    def policy(self) -> AssetPolicy:
        """Return the behavior switches in force."""
        ...

    def balance_of(self, account: AccountId) -> Balance:
        """Return the account's balance (0 if never written)."""
        ...

    def is_opted_in(self, account: AccountId) -> bool:
        """Return the account's opt-in flag (False if never written)."""
        ...

    def is_frozen(self, account: AccountId) -> bool:
        """Return the account's frozen flag (False if never written)."""
        ...

    def holders(self) -> Set[AccountId]:
        """Return every account holding a non-zero balance."""
        ...
