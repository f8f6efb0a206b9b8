"""
asset.py - The asset instance: state owner and operation entry point

The Asset class is the only place that mutates asset state. Every public
operation follows the same shape:

    1. Read the caller from the explicit CallContext
    2. Run the guards from rules.py against this asset (as an AssetView)
    3. Apply the writes through the registries
    4. Emit exactly one event

Steps 2-4 run as one unit of work under the store's StoreGuard, so every
Asset handle attached to the same store is serialized together. Writes are
journaled, so an exception anywhere before the unit of work commits
(including one raised by the event sink) restores the pre-call state.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Set

from .core import (
    AccountId, AccountState, AssetParameters, AssetPolicy, Balance, CallContext, Roles,
    DEFAULT_POLICY,
    AssetError,
)
from .events import (
    AssetEvent, Creation, EventLog, EventSink, Freeze, Modify, OptIn, OptOut, Transfer,
)
from .registries import BalanceLedger, FreezeRegistry, RoleRegistry, SubscriptionRegistry
from .rules import (
    check_freeze, check_modify, check_opt_in, check_opt_out, check_transfer,
    resolve_roles, validate_amount,
)
from .storage import KeyValueStore, MemoryStore, StoreGuard, guard_for


_PARAMS_KEY = ("params", b"")
_POLICY_KEY = ("policy", b"")


def _require_account(value: Any, name: str) -> AccountId:
    if not isinstance(value, AccountId):
        raise TypeError(f"{name} must be AccountId, got {type(value).__name__}")
    return value


class Asset:
    """
    A single fungible asset with role-gated administration.

    Implements the AssetView protocol, so the guard functions in rules.py can
    be handed the asset itself.

    Concurrency:
        Operations are serialized per store: every Asset attached to the same
        store shares one lock and one journal. Calling back into the asset
        from inside an operation (e.g. from an event sink), through this
        handle or any other on the same store, raises ReentrantCall.

    Example:
        log = EventLog()
        asset = Asset.new(
            CallContext(creator, asset_id=asset_id),
            name="Gold", unit_label="GLD", total_supply=1_000_000, decimals=2,
            default_frozen=True, url="https://example.org/gld",
            metadata_hash=b"\\x00\\x01\\x02\\x03",
            manager=creator, freeze=creator,
            sink=log,
        )
        asset.opt_in(CallContext(alice))
        asset.freeze(CallContext(creator), alice, True)
    """

    def __init__(
        self,
        store: KeyValueStore,
        sink: Optional[EventSink] = None,
        verbose: bool = True,
        test_mode: bool = False,
    ):
        """
        Attach to a store that already holds an asset created by Asset.new().

        Args:
            store: Host storage holding the asset parameters, roles and accounts
            sink: Event channel (default: a fresh EventLog)
            verbose: Print a line for every applied or rejected operation
            test_mode: Allow set_balance() (default: False)

        Raises:
            AssetError: If the store holds no asset
        """
        params = store.get(_PARAMS_KEY)
        if not isinstance(params, AssetParameters):
            raise AssetError("Store holds no asset; create one with Asset.new()")
        if sink is not None and not isinstance(sink, EventSink):
            raise TypeError("sink must implement emit(event)")

        self._store = store
        self._params: AssetParameters = params
        self._policy: AssetPolicy = store.get(_POLICY_KEY, DEFAULT_POLICY)
        self._sink: EventSink = sink if sink is not None else EventLog()
        self.verbose = verbose
        self._test_mode = test_mode

        self._guard: StoreGuard = guard_for(store)
        journal = self._guard.journal
        self._balances = BalanceLedger(store, journal)
        self._subscriptions = SubscriptionRegistry(store, journal)
        self._frozen = FreezeRegistry(store, journal)
        self._roles = RoleRegistry(store, journal)

    @classmethod
    def new(
        cls,
        ctx: CallContext,
        *,
        name: str,
        unit_label: str,
        total_supply: Balance,
        decimals: int,
        default_frozen: bool,
        url: str,
        metadata_hash: bytes,
        manager: Optional[AccountId] = None,
        reserve: Optional[AccountId] = None,
        freeze: Optional[AccountId] = None,
        clawback: Optional[AccountId] = None,
        policy: AssetPolicy = DEFAULT_POLICY,
        store: Optional[KeyValueStore] = None,
        sink: Optional[EventSink] = None,
        verbose: bool = True,
        test_mode: bool = False,
    ) -> Asset:
        """
        Create a new asset.

        The caller becomes the creator and ctx.asset_id becomes the asset's
        identity. Omitted roles are set to ZERO_ACCOUNT. All per-account
        registries start empty and no balance is credited to anyone, whatever
        total_supply says.

        No event is emitted unless policy.emit_creation_event is set.

        Raises:
            ValueError: If ctx.asset_id is missing or a parameter is out of range
            AssetError: If `store` already holds an asset
        """
        if ctx.asset_id is None:
            raise ValueError("CallContext.asset_id is required to create an asset")
        if not isinstance(policy, AssetPolicy):
            raise TypeError("policy must be AssetPolicy")

        params = AssetParameters(
            asset_id=ctx.asset_id,
            creator=ctx.caller,
            name=name,
            unit_label=unit_label,
            total_supply=total_supply,
            decimals=decimals,
            default_frozen=default_frozen,
            url=url,
            metadata_hash=metadata_hash,
        )
        roles = Roles.from_optional(manager=manager, reserve=reserve, freeze=freeze, clawback=clawback)

        if store is None:
            store = MemoryStore()

        # Writes and the Creation event form one unit of work, so a failing
        # sink leaves the store empty and creation can be retried.
        try:
            with guard_for(store).unit_of_work("CREATE") as journal:
                if _PARAMS_KEY in store:
                    raise AssetError("Store already holds an asset")
                for key, value in ((_PARAMS_KEY, params), (_POLICY_KEY, policy)):
                    journal.record(store, key)
                    store.set(key, value)
                RoleRegistry(store, journal).replace(roles)

                asset = cls(store, sink=sink, verbose=verbose, test_mode=test_mode)
                if policy.emit_creation_event:
                    asset._sink.emit(Creation(
                        asset_id=params.asset_id,
                        asset_name=params.name,
                        creator=params.creator,
                        total=params.total_supply,
                    ))
        except Exception as exc:
            if verbose:
                print(f"✗ REJECTED CREATE: {type(exc).__name__}: {exc}")
            raise

        if asset.verbose:
            print(f"📝 Created: {params.name} ({params.unit_label}) "
                  f"supply={params.total_supply} decimals={params.decimals} "
                  f"default_frozen={params.default_frozen}")
        return asset

    # ========================================================================
    # AssetView PROTOCOL IMPLEMENTATION (read-only methods)
    # ========================================================================

    @property
    def params(self) -> AssetParameters:
        return self._params

    @property
    def asset_id(self) -> AccountId:
        return self._params.asset_id

    @property
    def roles(self) -> Roles:
        return self._roles.roles

    @property
    def policy(self) -> AssetPolicy:
        return self._policy

    @property
    def sink(self) -> EventSink:
        return self._sink

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def balance_of(self, account: AccountId) -> Balance:
        """Balance of `account` (0 if it never held any)."""
        return self._balances.balance_of(_require_account(account, "account"))

    def is_opted_in(self, account: AccountId) -> bool:
        return self._subscriptions.is_opted_in(_require_account(account, "account"))

    def is_frozen(self, account: AccountId) -> bool:
        return self._frozen.is_frozen(_require_account(account, "account"))

    def account_state(self, account: AccountId) -> AccountState:
        """Snapshot of the account's balance, opt-in and frozen flags."""
        _require_account(account, "account")
        return AccountState(
            account=account,
            balance=self._balances.balance_of(account),
            opted_in=self._subscriptions.is_opted_in(account),
            frozen=self._frozen.is_frozen(account),
        )

    def holders(self) -> Set[AccountId]:
        """Accounts with a non-zero balance."""
        return self._balances.holders()

    def subscribers(self) -> Set[AccountId]:
        """Accounts currently opted in."""
        return self._subscriptions.subscribers()

    def frozen_accounts(self) -> Set[AccountId]:
        return self._frozen.frozen_accounts()

    def circulating_supply(self) -> Balance:
        """Sum of all balances."""
        return self._balances.total()

    def verify_supply(self) -> Dict[str, Any]:
        """
        Compare the sum of all balances with the declared total supply.

        Nothing seeds total_supply into any balance, so on a fresh asset this
        reports a discrepancy equal to the whole declared supply. Transfers
        never change the circulating figure.

        Returns:
            Dict with keys:
            - 'valid': bool - True if circulating == total_supply
            - 'total_supply': declared total supply
            - 'circulating': sum of all balances
            - 'difference': total_supply - circulating
        """
        circulating = self.circulating_supply()
        total = self._params.total_supply
        return {
            'valid': circulating == total,
            'total_supply': total,
            'circulating': circulating,
            'difference': total - circulating,
        }

    # ========================================================================
    # OPERATIONS (Mutating)
    # ========================================================================

    def transfer(self, ctx: CallContext, receiver: AccountId, amount: Balance) -> Transfer:
        """
        Move `amount` from the caller to `receiver`.

        Raises:
            NotEnoughBalance: Caller holds less than `amount`
            NotOptedIn: Receiver has not opted in
            ZeroAmount: Zero amount under policy.reject_zero_amount
            FrozenAccount: Either side frozen under policy.enforce_freeze_on_transfer
        """
        sender = ctx.caller
        _require_account(receiver, "receiver")
        with self._operation("TRANSFER"):
            check_transfer(self, sender, receiver, amount)
            self._balances.debit(sender, amount)
            self._balances.credit(receiver, amount)
            event = Transfer(
                sender=sender,
                receiver=receiver,
                asset_id=self.asset_id,
                amount=amount,
            )
            self._sink.emit(event)
        self._report(event)
        return event

    def opt_in(self, ctx: CallContext) -> OptIn:
        """
        Subscribe the caller so it can receive the asset.

        Raises:
            AlreadyOptedIn: Caller is already subscribed
        """
        account = ctx.caller
        with self._operation("OPT_IN"):
            check_opt_in(self, account)
            self._subscriptions.set_opted_in(account, True)
            event = OptIn(asset_id=self.asset_id, account=account)
            self._sink.emit(event)
        self._report(event)
        return event

    def opt_out(self, ctx: CallContext) -> OptOut:
        """
        Unsubscribe the caller. Any balance it holds stays where it is.

        Raises:
            NotOptedIn: Caller is not subscribed
        """
        account = ctx.caller
        with self._operation("OPT_OUT"):
            check_opt_out(self, account)
            self._subscriptions.set_opted_in(account, False)
            event = OptOut(asset_id=self.asset_id, account=account)
            self._sink.emit(event)
        self._report(event)
        return event

    def freeze(self, ctx: CallContext, account: AccountId, freeze: bool) -> Freeze:
        """
        Set `account`'s frozen flag. Only the freeze authority may call this,
        and only on an asset created with default_frozen.

        Raises:
            NotFreezable: Asset was not created with default_frozen
            NotFreezeId: Caller is not the freeze authority
            AlreadyFrozen: Account is already frozen (also blocks unfreezing
                           unless policy.allow_unfreeze)
            NotFrozen: Unfreezing an unfrozen account under policy.allow_unfreeze
        """
        caller = ctx.caller
        _require_account(account, "account")
        with self._operation("FREEZE"):
            check_freeze(self, caller, account, freeze)
            self._frozen.set_frozen(account, freeze)
            event = Freeze(
                asset_id=self.asset_id,
                account=account,
                freeze_id=self.roles.freeze_authority,
                freeze=freeze,
            )
            self._sink.emit(event)
        self._report(event)
        return event

    def modify_asset(
        self,
        ctx: CallContext,
        manager: Optional[AccountId] = None,
        reserve: Optional[AccountId] = None,
        freeze: Optional[AccountId] = None,
        clawback: Optional[AccountId] = None,
    ) -> Modify:
        """
        Replace all four role holders. Only the manager may call this.

        An omitted role is cleared to ZERO_ACCOUNT, not left unchanged
        (unless policy.absent_role_unchanged). Calling with no roles at all
        clears every role, including the manager; after that only a caller
        presenting ZERO_ACCOUNT could change roles again.

        Raises:
            NotManagerId: Caller is not the manager
        """
        caller = ctx.caller
        with self._operation("MODIFY"):
            check_modify(self, caller)
            new_roles = resolve_roles(self, manager=manager, reserve=reserve,
                                      freeze=freeze, clawback=clawback)
            self._roles.replace(new_roles)
            event = Modify(
                manager_id=new_roles.manager,
                reserve_id=new_roles.reserve,
                freeze_id=new_roles.freeze_authority,
                clawback_id=new_roles.clawback_authority,
            )
            self._sink.emit(event)
        self._report(event)
        return event

    # ========================================================================
    # TEST SUPPORT
    # ========================================================================

    def set_balance(self, account: AccountId, amount: Balance) -> None:
        """
        Set an account's balance directly.

        WARNING: This bypasses every rule and emits no event. There is no
        mint path, so tests use this to seed balances. Only available in test
        mode.

        Raises:
            AssetError: If called when test_mode is False
        """
        if not self._test_mode:
            raise AssetError(
                "set_balance() is disabled in production mode. "
                "Set test_mode=True when creating the Asset for testing."
            )
        _require_account(account, "account")
        validate_amount(amount)
        with self._guard.lock:
            self._balances.set_balance(account, amount)

    def clone(self) -> Asset:
        """
        Create an independent deep copy of this asset.

        The copy gets its own MemoryStore holding every key of this asset's
        store. An EventLog sink is copied; any other sink is replaced by a
        fresh EventLog so the copy never emits into the original's channel.
        """
        with self._guard.lock:
            store = MemoryStore({key: self._store.get(key) for key in self._store.keys()})
            sink = self._sink.copy() if isinstance(self._sink, EventLog) else EventLog()
            return Asset(store, sink=sink, verbose=self.verbose, test_mode=self._test_mode)

    # ========================================================================
    # INTERNALS
    # ========================================================================

    @contextmanager
    def _operation(self, label: str) -> Iterator[None]:
        """
        Run one operation as a single unit of work.

        The unit of work belongs to the store, not to this handle: a second
        Asset on the same store cannot start an operation until this one ends.
        """
        try:
            with self._guard.unit_of_work(label):
                yield
        except Exception as exc:
            if self.verbose:
                print(f"✗ REJECTED {label}: {type(exc).__name__}: {exc}")
            raise

    def _report(self, event: AssetEvent) -> None:
        if self.verbose:
            print(f"✓ {event.kind.upper()}: {event!r}")

    def __repr__(self) -> str:
        p = self._params
        return (f"Asset({p.name!r}, unit={p.unit_label!r}, id={p.asset_id!r}, "
                f"holders={len(self.holders())})")
