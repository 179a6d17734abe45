"""
In-memory implementation of the brokerage storage ports.

Used when STORAGE_BACKEND=memory and by the test suite.
All data is lost when the store is destroyed. Entities are copied on
the way in and out, so callers never share state with the store.
"""

import copy
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4

from app.domain.brokerage.entities import Account, Address, Trade, TradeStatus
from app.domain.brokerage.ports import (
    AccountRepository,
    AddressRepository,
    TradeRepository,
    UnitOfWork,
)


class InMemoryStore:
    """Shared tables for the in-memory adapters.

    Dicts preserve insertion order, which stands in for storage order.
    """

    def __init__(self) -> None:
        self.accounts: dict[UUID, Account] = {}
        self.addresses: dict[UUID, Address] = {}
        self.trades: dict[UUID, Trade] = {}
        self.lock = threading.RLock()

    def clear(self) -> None:
        """Clear all stored data. Useful for test cleanup."""
        with self.lock:
            self.accounts.clear()
            self.addresses.clear()
            self.trades.clear()

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(
            {"accounts": self.accounts, "addresses": self.addresses, "trades": self.trades}
        )

    def restore(self, snapshot: dict[str, Any]) -> None:
        self.accounts = snapshot["accounts"]
        self.addresses = snapshot["addresses"]
        self.trades = snapshot["trades"]


class InMemoryAccountRepository(AccountRepository):
    """In-memory account table."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def save(self, account: Account) -> Account:
        with self._store.lock:
            account.id = uuid4()
            account.created_at = datetime.now(timezone.utc)
            stored = copy.deepcopy(account)
            stored.address = None
            self._store.accounts[account.id] = stored
        return account

    def update(self, account: Account) -> None:
        with self._store.lock:
            stored = self._store.accounts.get(account.id)
            if stored is None:
                return
            stored.username = account.username
            stored.email = account.email
            stored.address_id = account.address_id

    def find_by_id(self, account_id: UUID) -> Optional[Account]:
        with self._store.lock:
            account = self._store.accounts.get(account_id)
            return copy.deepcopy(account) if account else None

    def list_all(self) -> list[Account]:
        with self._store.lock:
            return [copy.deepcopy(a) for a in self._store.accounts.values()]


class InMemoryAddressRepository(AddressRepository):
    """In-memory address table; the link is read from the account table."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def save(self, address: Address) -> Address:
        with self._store.lock:
            address.id = uuid4()
            self._store.addresses[address.id] = copy.deepcopy(address)
        return address

    def update(self, address: Address) -> None:
        with self._store.lock:
            if address.id in self._store.addresses:
                self._store.addresses[address.id] = copy.deepcopy(address)

    def find_by_id(self, address_id: UUID) -> Optional[Address]:
        with self._store.lock:
            address = self._store.addresses.get(address_id)
            return copy.deepcopy(address) if address else None

    def find_by_account(self, account_id: UUID) -> Optional[Address]:
        with self._store.lock:
            account = self._store.accounts.get(account_id)
            if account is None or account.address_id is None:
                return None
            return self.find_by_id(account.address_id)

    def delete(self, address_id: UUID) -> None:
        with self._store.lock:
            self._store.addresses.pop(address_id, None)


class InMemoryTradeRepository(TradeRepository):
    """In-memory trade table."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    def save(self, trade: Trade) -> Trade:
        with self._store.lock:
            trade.id = uuid4()
            trade.status = TradeStatus.SUBMITTED
            trade.created_at = datetime.now(timezone.utc)
            self._store.trades[trade.id] = copy.deepcopy(trade)
        return trade

    def update(self, trade: Trade) -> None:
        with self._store.lock:
            stored = self._store.trades.get(trade.id)
            if stored is None:
                return
            stored.symbol = trade.symbol
            stored.quantity = trade.quantity
            stored.side = trade.side
            stored.price = trade.price
            stored.status = trade.status

    def find_by_id(self, trade_id: UUID) -> Optional[Trade]:
        with self._store.lock:
            trade = self._store.trades.get(trade_id)
            return copy.deepcopy(trade) if trade else None

    def find_by_account(self, account_id: UUID) -> list[Trade]:
        with self._store.lock:
            return [
                copy.deepcopy(t)
                for t in self._store.trades.values()
                if t.account_id == account_id
            ]

    def find_by_id_and_account(
        self, trade_id: UUID, account_id: UUID
    ) -> Optional[Trade]:
        trade = self.find_by_id(trade_id)
        if trade is None or trade.account_id != account_id:
            return None
        return trade


class InMemoryUnitOfWork(UnitOfWork):
    """Serializes transactions on the store lock and restores on error."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._store.lock:
            snapshot = self._store.snapshot()
            try:
                yield
            except BaseException:
                self._store.restore(snapshot)
                raise
