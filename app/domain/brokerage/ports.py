"""
Port interfaces (ABCs) for the brokerage bounded context.

Ports define the storage contracts the managers require.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from uuid import UUID

from app.domain.brokerage.entities import Account, Address, Trade


class AccountRepository(ABC):
    """Port for persisting and retrieving accounts."""

    @abstractmethod
    def save(self, account: Account) -> Account:
        """Insert an account and return it with its generated id.

        Raises:
            StorageError: If the insert returned no identifier.
        """
        raise NotImplementedError

    @abstractmethod
    def update(self, account: Account) -> None:
        """Overwrite username, email and address link, keyed by id."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, account_id: UUID) -> Optional[Account]:
        """Return an account by its id, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[Account]:
        """Return every account."""
        raise NotImplementedError


class AddressRepository(ABC):
    """Port for persisting and retrieving addresses."""

    @abstractmethod
    def save(self, address: Address) -> Address:
        """Insert an address and return it with its generated id."""
        raise NotImplementedError

    @abstractmethod
    def update(self, address: Address) -> None:
        """Overwrite every address field, keyed by id."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, address_id: UUID) -> Optional[Address]:
        """Return an address by its id, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def find_by_account(self, account_id: UUID) -> Optional[Address]:
        """Return the address linked to an account, or None."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, address_id: UUID) -> None:
        """Delete an address record. Deleting a missing id is a no-op."""
        raise NotImplementedError


class TradeRepository(ABC):
    """Port for persisting and retrieving trades."""

    @abstractmethod
    def save(self, trade: Trade) -> Trade:
        """Insert a trade and return it with generated id and SUBMITTED status."""
        raise NotImplementedError

    @abstractmethod
    def update(self, trade: Trade) -> None:
        """Overwrite symbol, quantity, side, price and status, keyed by id."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, trade_id: UUID) -> Optional[Trade]:
        """Return a trade by its id, or None if not found."""
        raise NotImplementedError

    @abstractmethod
    def find_by_account(self, account_id: UUID) -> list[Trade]:
        """Return all trades owned by an account, in storage order."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id_and_account(
        self, trade_id: UUID, account_id: UUID
    ) -> Optional[Trade]:
        """Return a trade only if it exists and belongs to the account."""
        raise NotImplementedError


class UnitOfWork(ABC):
    """Port for scoping several repository calls into one transaction.

    Usage:
        with unit_of_work.transaction():
            account_repo.update(account)
            address_repo.delete(address_id)

    Nested scopes join the outermost one. Leaving the outermost scope
    with an exception rolls back every write made inside it.
    """

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Return a context manager wrapping one storage transaction."""
        raise NotImplementedError
