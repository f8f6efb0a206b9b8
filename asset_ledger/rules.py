"""
rules.py - Precondition guards for every asset operation

Pure functions over a read-only AssetView. Each guard either returns
normally or raises the AssetError subclass for the first precondition that
fails, checked in the order the operation defines. Guards never mutate;
Asset runs them before touching storage, which is what makes a failed
operation leave state unchanged.
"""

from __future__ import annotations
from typing import Optional

from .core import (
    AccountId, AssetView, Balance, Roles, MAX_BALANCE,
    NotManagerId, NotFreezeId, NotOptedIn, AlreadyOptedIn,
    NotFrozen, NotFreezable, AlreadyFrozen, FrozenAccount,
    NotEnoughBalance, ZeroAmount, BalanceOverflow,
    role_or_zero,
)


def validate_amount(amount: Balance) -> None:
    """
    Reject malformed quantities.

    Raises:
        TypeError: If amount is not an int (bools are rejected too).
        ValueError: If amount is negative or exceeds MAX_BALANCE.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"amount must be int, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    if amount > MAX_BALANCE:
        raise ValueError(f"amount exceeds maximum balance: {amount}")


def check_transfer(
    view: AssetView,
    sender: AccountId,
    receiver: AccountId,
    amount: Balance,
) -> None:
    """
    Validate a transfer of `amount` from `sender` to `receiver`.

    Order:
        1. amount well-formed (ZeroAmount only under policy.reject_zero_amount)
        2. sender balance >= amount
        3. receiver opted in
        4. neither side frozen (only under policy.enforce_freeze_on_transfer)

    Raises:
        ZeroAmount, NotEnoughBalance, NotOptedIn, FrozenAccount, BalanceOverflow
    """
    validate_amount(amount)
    policy = view.policy

    if policy.reject_zero_amount and amount == 0:
        raise ZeroAmount("Transfer amount must be positive")

    sender_balance = view.balance_of(sender)
    if sender_balance < amount:
        raise NotEnoughBalance(
            f"{sender!r} holds {sender_balance}, cannot send {amount}"
        )

    if not view.is_opted_in(receiver):
        raise NotOptedIn(f"Receiver {receiver!r} has not opted in")

    if policy.enforce_freeze_on_transfer:
        if view.is_frozen(sender):
            raise FrozenAccount(f"Sender {sender!r} is frozen")
        if view.is_frozen(receiver):
            raise FrozenAccount(f"Receiver {receiver!r} is frozen")

    # Receiver is credited after the sender is debited, so a self-transfer
    # can never overflow.
    if sender != receiver:
        receiver_balance = view.balance_of(receiver)
        if receiver_balance + amount > MAX_BALANCE:
            raise BalanceOverflow(
                f"Crediting {amount} to {receiver!r} exceeds maximum balance"
            )


def check_opt_in(view: AssetView, account: AccountId) -> None:
    """Raises AlreadyOptedIn if `account` is already subscribed."""
    if view.is_opted_in(account):
        raise AlreadyOptedIn(f"{account!r} has already opted in")


def check_opt_out(view: AssetView, account: AccountId) -> None:
    """Raises NotOptedIn if `account` is not subscribed."""
    if not view.is_opted_in(account):
        raise NotOptedIn(f"{account!r} has not opted in")


def check_freeze(
    view: AssetView,
    caller: AccountId,
    account: AccountId,
    freeze: bool,
) -> None:
    """
    Validate a request to set `account`'s frozen flag to `freeze`.

    Order:
        1. asset created with default_frozen (NotFreezable, regardless of caller)
        2. caller is the freeze authority (NotFreezeId)
        3. state gate

    The default state gate rejects any request on an account that is already
    frozen, including a request to unfreeze it. Under policy.allow_unfreeze
    the gate compares the request with the current flag instead: freezing a
    frozen account raises AlreadyFrozen and unfreezing an unfrozen one raises
    NotFrozen.
    """
    if not isinstance(freeze, bool):
        raise TypeError(f"freeze must be bool, got {type(freeze).__name__}")

    if not view.params.default_frozen:
        raise NotFreezable("Asset was not created with default_frozen")

    if caller != view.roles.freeze_authority:
        raise NotFreezeId(f"{caller!r} is not the freeze authority")

    frozen = view.is_frozen(account)
    if view.policy.allow_unfreeze:
        if freeze and frozen:
            raise AlreadyFrozen(f"{account!r} is already frozen")
        if not freeze and not frozen:
            raise NotFrozen(f"{account!r} is not frozen")
    elif frozen:
        raise AlreadyFrozen(f"{account!r} is already frozen")


def check_modify(view: AssetView, caller: AccountId) -> None:
    """Raises NotManagerId unless `caller` is the current manager."""
    if caller != view.roles.manager:
        raise NotManagerId(f"{caller!r} is not the manager")


def resolve_roles(
    view: AssetView,
    manager: Optional[AccountId] = None,
    reserve: Optional[AccountId] = None,
    freeze: Optional[AccountId] = None,
    clawback: Optional[AccountId] = None,
) -> Roles:
    """
    Compute the role set a modify_asset call would install.

    By default this is a wholesale replace: an omitted role is cleared to
    ZERO_ACCOUNT. Under policy.absent_role_unchanged an omitted role keeps
    its current holder.
    """
    for name, value in (('manager', manager), ('reserve', reserve),
                        ('freeze', freeze), ('clawback', clawback)):
        if value is not None and not isinstance(value, AccountId):
            raise TypeError(f"{name} must be AccountId or None")

    if view.policy.absent_role_unchanged:
        current = view.roles
        return Roles(
            manager=current.manager if manager is None else manager,
            reserve=current.reserve if reserve is None else reserve,
            freeze_authority=current.freeze_authority if freeze is None else freeze,
            clawback_authority=current.clawback_authority if clawback is None else clawback,
        )

    return Roles(
        manager=role_or_zero(manager),
        reserve=role_or_zero(reserve),
        freeze_authority=role_or_zero(freeze),
        clawback_authority=role_or_zero(clawback),
    )
