"""
events.py - Domain events and the emission channel

Every successful operation emits exactly one event. Events are just data:
frozen dataclasses carrying the fields observers need. Delivery is the
host's business; the asset only calls EventSink.emit().

EventLog is the default sink. It keeps events in emission order and is the
audit trail for an in-process asset.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Type, TypeVar, runtime_checkable

from .core import AccountId, Balance


# ============================================================================
# EVENT DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class AssetEvent:
    """Base class for all domain events."""

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, slots=True)
class Transfer(AssetEvent):
    """Emitted when balance moves from sender to receiver."""
    sender: AccountId
    receiver: AccountId
    asset_id: AccountId
    amount: Balance


@dataclass(frozen=True, slots=True)
class Creation(AssetEvent):
    """Emitted at construction when AssetPolicy.emit_creation_event is on."""
    asset_id: AccountId
    asset_name: str
    creator: AccountId
    total: Balance


@dataclass(frozen=True, slots=True)
class Freeze(AssetEvent):
    """Emitted when the freeze authority sets an account's frozen flag."""
    asset_id: AccountId
    account: AccountId
    freeze_id: AccountId
    freeze: bool


@dataclass(frozen=True, slots=True)
class Modify(AssetEvent):
    """Emitted when the manager replaces the role set. Carries the new roles."""
    manager_id: AccountId
    reserve_id: AccountId
    freeze_id: AccountId
    clawback_id: AccountId


@dataclass(frozen=True, slots=True)
class OptIn(AssetEvent):
    """Emitted when an account opts in to receive the asset."""
    asset_id: AccountId
    account: AccountId


@dataclass(frozen=True, slots=True)
class OptOut(AssetEvent):
    """Emitted when an account opts out of receiving the asset."""
    asset_id: AccountId
    account: AccountId


# Revoke and Destruction are declared for observers that decode the full
# event set. No operation emits them: there is no clawback or destroy call.

@dataclass(frozen=True, slots=True)
class Revoke(AssetEvent):
    asset_id: AccountId
    from_account: AccountId
    clawback: AccountId
    amount: Balance


@dataclass(frozen=True, slots=True)
class Destruction(AssetEvent):
    asset_id: AccountId
    destroyer: AccountId


# ============================================================================
# EMISSION CHANNEL
# ============================================================================

@runtime_checkable
class EventSink(Protocol):
    """One-way channel the asset emits events into."""

    def emit(self, event: AssetEvent) -> None:
        ...


E = TypeVar('E', bound=AssetEvent)


class EventLog:
    """
    In-memory EventSink that records events in emission order.

    Example:
        log = EventLog()
        asset = Asset.new(ctx, ..., sink=log)
        asset.opt_in(CallContext(alice))
        assert isinstance(log.last(), OptIn)
    """

    def __init__(self, events: Optional[List[AssetEvent]] = None):
        self._events: List[AssetEvent] = list(events or [])

    def emit(self, event: AssetEvent) -> None:
        if not isinstance(event, AssetEvent):
            raise TypeError(f"Expected AssetEvent, got {type(event).__name__}")
        self._events.append(event)

    @property
    def events(self) -> List[AssetEvent]:
        """Copy of all recorded events."""
        return list(self._events)

    def of_type(self, event_type: Type[E]) -> List[E]:
        """Return recorded events of one type, in order."""
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self) -> Optional[AssetEvent]:
        return self._events[-1] if self._events else None

    def clear(self) -> None:
        self._events.clear()

    def copy(self) -> EventLog:
        return EventLog(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[AssetEvent]:
        return iter(list(self._events))

    def __repr__(self) -> str:
        return f"EventLog({len(self._events)} events)"
