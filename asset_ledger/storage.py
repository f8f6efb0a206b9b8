"""
storage.py - Key-value storage contract and typed per-account mappings

The host provides durable key-value storage; the asset only needs
read-your-writes within a call. KeyValueStore is that contract and
MemoryStore is the in-process implementation.

StorageMapping is a typed view over one namespace of a store, keyed by
AccountId, returning a default for absent keys (entries appear lazily on
first write). Writes go through a WriteJournal so a failed operation can be
rolled back to the exact pre-call state.

StoreGuard serializes units of work per store rather than per handle: every
Asset attached to the same store shares one lock, one running flag and one
journal.
"""

from __future__ import annotations
from contextlib import contextmanager
import threading
import weakref
from typing import (
    Any, Dict, Generic, Hashable, Iterator, List, Optional, Protocol, Tuple, TypeVar,
    runtime_checkable,
)

from .core import AccountId, ReentrantCall


# Storage keys are (namespace, raw account bytes).
StorageKey = Tuple[str, bytes]

_MISSING = object()

V = TypeVar('V')


@runtime_checkable
class KeyValueStore(Protocol):
    """Durable key-value storage supplied by the host."""

    def get(self, key: Hashable, default: Any = None) -> Any:
        ...

    def set(self, key: Hashable, value: Any) -> None:
        ...

    def delete(self, key: Hashable) -> None:
        ...

    def __contains__(self, key: Hashable) -> bool:
        ...

    def keys(self) -> Iterator[Hashable]:
        ...


class MemoryStore:
    """Dict-backed KeyValueStore."""

    def __init__(self, data: Optional[Dict[Hashable, Any]] = None):
        self._data: Dict[Hashable, Any] = dict(data or {})

    def get(self, key: Hashable, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: Hashable, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: Hashable) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def keys(self) -> Iterator[Hashable]:
        return iter(list(self._data.keys()))

    def __len__(self) -> int:
        return len(self._data)

    def copy(self) -> MemoryStore:
        return MemoryStore(self._data)


class WriteJournal:
    """
    Records the prior value of every key written while a unit of work is open.

    Only the first write to a key within a unit of work is recorded, so
    rollback() restores the value the key had when begin() was called.
    Outside a unit of work, writes are not recorded.
    """

    def __init__(self):
        self._entries: List[Tuple[KeyValueStore, Hashable, Any]] = []
        self._seen: set = set()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def begin(self) -> None:
        if self._active:
            raise RuntimeError("WriteJournal already has an open unit of work")
        self._entries.clear()
        self._seen.clear()
        self._active = True

    def record(self, store: KeyValueStore, key: Hashable) -> None:
        if not self._active:
            return
        marker = (id(store), key)
        if marker in self._seen:
            return
        self._seen.add(marker)
        previous = store.get(key, _MISSING) if key in store else _MISSING
        self._entries.append((store, key, previous))

    def commit(self) -> None:
        self._entries.clear()
        self._seen.clear()
        self._active = False

    def rollback(self) -> None:
        """Restore every recorded key, newest write first."""
        for store, key, previous in reversed(self._entries):
            if previous is _MISSING:
                store.delete(key)
            else:
                store.set(key, previous)
        self.commit()

    def __len__(self) -> int:
        return len(self._entries)


class StoreGuard:
    """
    Serialization state for one store, shared by every Asset attached to it.

    Holds the lock, the "operation running" flag and the WriteJournal, so two
    handles on the same store can neither interleave nor nest operations.
    Obtain one with guard_for(store); never construct it per handle.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.journal = WriteJournal()
        self.executing = False

    @contextmanager
    def unit_of_work(self, label: str) -> Iterator[WriteJournal]:
        """
        Run a block as one all-or-nothing unit of work on the store.

        Journaled writes are committed when the block exits normally and
        rolled back when it raises; the exception is re-raised unchanged.

        Raises:
            ReentrantCall: If a unit of work on this store is already running
        """
        with self.lock:
            if self.executing:
                raise ReentrantCall(f"{label} called while another operation is running")
            self.executing = True
            self.journal.begin()
            try:
                yield self.journal
            except Exception:
                self.journal.rollback()
                raise
            else:
                self.journal.commit()
            finally:
                self.executing = False


_GUARDS: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
_GUARDS_LOCK = threading.Lock()


def guard_for(store: KeyValueStore) -> StoreGuard:
    """
    Return the StoreGuard for `store`, creating it on first use.

    The guard lives as long as the store does.

    Raises:
        TypeError: If the store cannot be weakly referenced or hashed
    """
    with _GUARDS_LOCK:
        try:
            guard = _GUARDS.get(store)
            if guard is None:
                guard = StoreGuard()
                _GUARDS[store] = guard
        except TypeError as exc:
            raise TypeError(
                f"{type(store).__name__} must be hashable and weak-referenceable "
                f"to back an Asset"
            ) from exc
        return guard


class StorageMapping(Generic[V]):
    """
    Typed mapping from AccountId to a value, stored under one namespace.

    Example:
        balances = StorageMapping(store, "balance", default=0, journal=journal)
        balances.get(alice)        # 0 if never written
        balances.insert(alice, 10)
    """

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str,
        default: V,
        journal: Optional[WriteJournal] = None,
    ):
        if not namespace:
            raise ValueError("namespace cannot be empty")
        self.store = store
        self.namespace = namespace
        self.default = default
        self.journal = journal

    def _key(self, account: AccountId) -> StorageKey:
        if not isinstance(account, AccountId):
            raise TypeError(f"Expected AccountId, got {type(account).__name__}")
        return (self.namespace, account.raw)

    def get(self, account: AccountId) -> V:
        return self.store.get(self._key(account), self.default)

    def insert(self, account: AccountId, value: V) -> None:
        key = self._key(account)
        if self.journal is not None:
            self.journal.record(self.store, key)
        self.store.set(key, value)

    def contains(self, account: AccountId) -> bool:
        return self._key(account) in self.store

    def items(self) -> Iterator[Tuple[AccountId, V]]:
        """Iterate written entries of this namespace, ordered by account bytes."""
        raw_keys = sorted(
            k[1] for k in self.store.keys()
            if isinstance(k, tuple) and len(k) == 2 and k[0] == self.namespace
        )
        for raw in raw_keys:
            yield AccountId(raw), self.store.get((self.namespace, raw), self.default)
