"""
registries.py - Storage-backed per-account registries and the role set

Each registry owns one namespace of the host store:
    - BalanceLedger:         "balance"  -> int  (default 0)
    - SubscriptionRegistry:  "opted_in" -> bool (default False)
    - FreezeRegistry:        "frozen"   -> bool (default False)
    - RoleRegistry:          "roles"    -> one Roles record

Registries do not authorize anything; Asset runs the guards in rules.py
first and only then calls the mutators here.
"""

from __future__ import annotations
from typing import Dict, Optional, Set

from .core import (
    AccountId, Balance, Roles, MAX_BALANCE,
    NotEnoughBalance, BalanceOverflow,
)
from .storage import KeyValueStore, StorageMapping, WriteJournal


NAMESPACE_BALANCE = "balance"
NAMESPACE_OPTED_IN = "opted_in"
NAMESPACE_FROZEN = "frozen"
NAMESPACE_ROLES = "roles"

# Role set before anything has been written: every role unassigned.
EMPTY_ROLES = Roles()


class BalanceLedger:
    """Per-account non-negative balances."""

    def __init__(self, store: KeyValueStore, journal: Optional[WriteJournal] = None):
        self._balances: StorageMapping[Balance] = StorageMapping(
            store, NAMESPACE_BALANCE, default=0, journal=journal
        )

    def balance_of(self, account: AccountId) -> Balance:
        return self._balances.get(account)

    def debit(self, account: AccountId, amount: Balance) -> Balance:
        """Subtract `amount` from `account`; returns the new balance."""
        current = self._balances.get(account)
        if current < amount:
            raise NotEnoughBalance(f"{account!r} holds {current}, cannot debit {amount}")
        new_balance = current - amount
        self._balances.insert(account, new_balance)
        return new_balance

    def credit(self, account: AccountId, amount: Balance) -> Balance:
        """Add `amount` to `account`; returns the new balance."""
        new_balance = self._balances.get(account) + amount
        if new_balance > MAX_BALANCE:
            raise BalanceOverflow(f"Crediting {amount} to {account!r} exceeds maximum balance")
        self._balances.insert(account, new_balance)
        return new_balance

    def set_balance(self, account: AccountId, amount: Balance) -> None:
        self._balances.insert(account, amount)

    def positions(self) -> Dict[AccountId, Balance]:
        """All non-zero balances."""
        return {account: qty for account, qty in self._balances.items() if qty}

    def holders(self) -> Set[AccountId]:
        return set(self.positions())

    def total(self) -> Balance:
        """Sum of every balance, accumulated in account order."""
        return sum(qty for _, qty in self._balances.items())


class SubscriptionRegistry:
    """Per-account opt-in flags."""

    def __init__(self, store: KeyValueStore, journal: Optional[WriteJournal] = None):
        self._opted_in: StorageMapping[bool] = StorageMapping(
            store, NAMESPACE_OPTED_IN, default=False, journal=journal
        )

    def is_opted_in(self, account: AccountId) -> bool:
        return self._opted_in.get(account)

    def set_opted_in(self, account: AccountId, opted_in: bool) -> None:
        self._opted_in.insert(account, opted_in)

    def subscribers(self) -> Set[AccountId]:
        return {account for account, flag in self._opted_in.items() if flag}


class FreezeRegistry:
    """Per-account frozen flags."""

    def __init__(self, store: KeyValueStore, journal: Optional[WriteJournal] = None):
        self._frozen: StorageMapping[bool] = StorageMapping(
            store, NAMESPACE_FROZEN, default=False, journal=journal
        )

    def is_frozen(self, account: AccountId) -> bool:
        return self._frozen.get(account)

    def set_frozen(self, account: AccountId, frozen: bool) -> None:
        self._frozen.insert(account, frozen)

    def frozen_accounts(self) -> Set[AccountId]:
        return {account for account, flag in self._frozen.items() if flag}


class RoleRegistry:
    """
    The four administrative role holders, stored as one record.

    Only the manager may replace roles; that rule is enforced by
    rules.check_modify before replace() is called.
    """

    _KEY = (NAMESPACE_ROLES, b"")

    def __init__(self, store: KeyValueStore, journal: Optional[WriteJournal] = None):
        self._store = store
        self._journal = journal

    @property
    def roles(self) -> Roles:
        return self._store.get(self._KEY, EMPTY_ROLES)

    def replace(self, roles: Roles) -> Roles:
        """Overwrite all four role holders at once."""
        if not isinstance(roles, Roles):
            raise TypeError(f"Expected Roles, got {type(roles).__name__}")
        if self._journal is not None:
            self._journal.record(self._store, self._KEY)
        self._store.set(self._KEY, roles)
        return roles
